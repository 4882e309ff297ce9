# product_api/main.py
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from product_api.core.logging import setup_logging
from product_api.core.settings import Settings, get_settings
from product_api.repositories import InMemoryProductRepository, ProductRepository, SqlProductRepository
from product_api.routers.product import ProductHandler, build_router

logger = logging.getLogger("product-api")

tags_metadata = [
    {"name": "health", "description": "Liveness checks"},
    {"name": "products", "description": "Product CRUD"},
]


def _get_req_id_from_headers(request: Request) -> str:
    # Prefer X-Request-ID, then X-Correlation-ID; otherwise generate one.
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )


async def request_context_mw(request: Request, call_next):
    """
    - Generates/propagates X-Request-ID
    - Adds X-Process-Time
    """
    req_id = _get_req_id_from_headers(request)
    request.state.request_id = req_id

    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")
    return response


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or _get_req_id_from_headers(request)


def build_repository(settings: Settings) -> ProductRepository:
    """Pick the repository named by REPOSITORY_BACKEND."""
    if settings.REPOSITORY_BACKEND == "memory":
        return InMemoryProductRepository()
    return SqlProductRepository()


def create_app(
    repository: Optional[ProductRepository] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    App factory. The repository is passed in explicitly; when omitted it is
    built from settings (SQL by default).
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL.upper())

    owns_repository = repository is None
    if repository is None:
        repository = build_repository(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if owns_repository and isinstance(repository, SqlProductRepository):
            from product_api.database import DATABASE_URL, _mask_url, init_db_if_requested

            created = init_db_if_requested()
            logger.info(
                "SQL repository ready (url=%s, create_all=%s)", _mask_url(DATABASE_URL), created
            )
        logger.info(
            "%s %s started with %s", settings.SERVICE_NAME, settings.APP_VERSION, type(repository).__name__
        )
        yield
        logger.info("%s shutting down", settings.SERVICE_NAME)

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.APP_VERSION,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    app.middleware("http")(request_context_mw)

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Process-Time"],
        )

    # --- Exception handlers ---
    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _jsonable_errors(exc)},
            headers={"X-Request-ID": _request_id(request)},
        )

    # Starlette 404/405 as uniform JSON
    @app.exception_handler(StarletteHTTPException)
    async def _starlette_http_exc_handler(request: Request, exc: StarletteHTTPException):
        headers = dict(exc.headers or {})
        headers.setdefault("X-Request-ID", _request_id(request))
        detail = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            detail = {"message": "Not Found", "path": str(request.url.path)}
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            detail = {"message": "Method Not Allowed", "path": str(request.url.path)}
        return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=headers)

    @app.exception_handler(Exception)
    async def _unhandled_exc_handler(request: Request, exc: Exception):
        # ServerErrorMiddleware re-raises after this handler, so the server logs the traceback
        req_id = _request_id(request)
        logger.error("Unhandled error %s: %r (request_id=%s)", type(exc).__name__, exc, req_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
            headers={"X-Request-ID": req_id},
        )

    # --- Routes ---
    handler = ProductHandler(repository, settings.SERVICE_NAME)
    app.include_router(build_router(handler))

    # The dashboard frontend polls /api/health
    app.add_api_route("/api/health", handler.health, methods=["GET"], tags=["health"], include_in_schema=False)

    app.state.repository = repository
    return app


def _jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry exception objects (e.g. ValueError from validators)
    out = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        out.append(err)
    return out


app = create_app()
