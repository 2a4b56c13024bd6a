from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    EXPORT_DISABLED = ErrorDefinition(
        "EXPORT_DISABLED",
        "Export is not enabled for this table",
        status.HTTP_403_FORBIDDEN,
    )
    EXPORT_ROWS_LIMIT_EXCEEDED = ErrorDefinition(
        "EXPORT_ROWS_LIMIT_EXCEEDED",
        "Export rows exceed limit",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
