from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "DATATABLE-ENGINE"
    DEFAULT_PAGE_SIZE: int = 15
    MAX_PAGE_SIZE: int = 500
    DEFAULT_TABLE_NAME: str = "data"
    DEFAULT_SEARCH_PLACEHOLDER: str = "Search..."
    EXPORTS_MAX_ROWS: int = 0
    LOG_LEVEL: str = "INFO"
    TRACE_ID_HEADER: str = "X-Trace-ID"

settings = Settings()
