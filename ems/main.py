"""FastAPI application instance and wiring."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ems.core import get_logger
from ems.core.config import Settings, get_settings
from ems.core.errors import EmsError
from ems.core.log import init_logging
from ems.core.security import SecurityProvider
from ems.db.session import get_sessionmaker
from ems.middleware.auth import AuthMiddleware
from ems.routers import auth_router, documents_router, employees_router
from ems.services import (
    DocumentService,
    EmployeeDirectoryService,
    EmployeeLifecycleService,
    LocalBlobStore,
)

LOGGER = get_logger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EmsError)
    async def handle_domain_error(request: Request, exc: EmsError) -> JSONResponse:
        if exc.status_code >= 500:
            LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            LOGGER.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted(
            {".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]) for error in exc.errors()}
        )
        return JSONResponse(
            {"message": "Invalid request", "error": "validation_error", "detail": ", ".join(fields)},
            status_code=400,
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        LOGGER.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse({"message": "Server error"}, status_code=500)


def create_app(settings: Settings | None = None, session_factory: sessionmaker | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``session_factory`` lets callers (tests, scripts) share an engine that was
    built elsewhere; otherwise one is created from ``settings``.
    """

    settings = settings or get_settings()
    init_logging(settings)
    session_factory = session_factory or get_sessionmaker(settings=settings)

    blob_store = LocalBlobStore(settings.storage)
    security_provider = SecurityProvider(settings.auth, session_factory)

    app = FastAPI(title="Employee Records Service", version="0.1.0")
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.security = security_provider
    app.state.blob_store = blob_store
    app.state.lifecycle_service = EmployeeLifecycleService(session_factory, blob_store=blob_store)
    app.state.directory_service = EmployeeDirectoryService(session_factory)
    app.state.document_service = DocumentService(session_factory, blob_store)

    # Added first so CORS wraps it and answers preflight requests itself.
    app.add_middleware(
        AuthMiddleware,
        security_provider=security_provider,
        exempt_prefixes=(settings.storage.url_prefix,),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(employees_router)
    app.include_router(documents_router)

    settings.storage.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.storage.url_prefix,
        StaticFiles(directory=str(settings.storage.upload_dir)),
        name="uploads",
    )

    _register_exception_handlers(app)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        with session_factory() as session:
            session.execute(text("SELECT 1"))
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
