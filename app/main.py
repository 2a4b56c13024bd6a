from fastapi import FastAPI

from app.datatable.api import api_router
from app.datatable.core.config import settings
from app.datatable.core.errors import setup_exception_handlers
from app.datatable.core.logging import configure_logging
from app.datatable.middleware.observability import ObservabilityMiddleware
from app.datatable.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(TraceIdMiddleware, header_name=settings.TRACE_ID_HEADER)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
