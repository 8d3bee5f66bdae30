from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from core.db import Database
from core.errors import DatabaseConnectionError, DatabaseError, InputValidationError
from core.logging_config import configure_logging
from core.settings import Settings
from listings import router as listings_router
from orders import router as orders_router
from orders.schemas import format_validation_errors

logger = logging.getLogger(__name__)

GREETING = "Hello from FastAPI + PostgreSQL API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process. An unreachable database does not block startup;
    # the pool is retried on the next acquire and requests answer 500 until then.
    db: Database = app.state.db
    try:
        await db.connect()
    except DatabaseConnectionError as exc:
        logger.warning("db_connect_deferred error=%s", exc)
    try:
        yield
    finally:
        await db.close()


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Sample PostgreSQL API",
        version="1.0.0",
        description="REST-like API with CRUD and Swagger",
        docs_url="/api-docs",
        openapi_url="/api-docs/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database or Database(settings)

    # Any origin may call this API; credentials cannot be combined with "*".
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = format_validation_errors(exc.errors())
        logger.debug("validation_failed path=%s errors=%s", request.url.path, errors)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})

    @app.exception_handler(InputValidationError)
    async def input_validation_handler(request: Request, exc: InputValidationError) -> JSONResponse:
        logger.debug("validation_failed path=%s errors=%s", request.url.path, exc.errors)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": exc.errors})

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
        # The driver's message goes back to the client unchanged.
        logger.warning("query_failed path=%s error=%s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    app.include_router(orders_router.router, tags=["orders"])
    app.include_router(listings_router.router, tags=["listings"])

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root() -> str:
        return GREETING

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    settings: Settings = app.state.settings
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
