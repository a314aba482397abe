import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from jwks_service.core.config import Settings, settings
from jwks_service.core.context import ServiceContext
from jwks_service.core.exceptions import ErrorKind, KeyServiceError
from jwks_service.api.v1 import auth, wellknown
from jwks_service.schemas.jwks import ErrorDetail, ErrorResponse
from jwks_service.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# Every core failure reaches the caller as a generic server error
ERROR_STATUS = {
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.NO_KEY_AVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.KEY_DERIVATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.SIGNING: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

UNGATED_PATHS = {"/health"}

def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for the application.
        Startup errors propagate so the server never starts serving.
        """
        # Startup
        context = ServiceContext(config)
        app.state.context = context
        try:
            await context.start()
        except Exception:
            logger.exception("Key store startup failed")
            await context.close()
            raise

        yield

        # Shutdown
        await context.close()

    app = FastAPI(
        title=config.APP_NAME,
        lifespan=lifespan,
        openapi_url="/api/v1/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Security Headers Middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        return response

    # Hold requests until the key store is ready; waiters resume in arrival order
    @app.middleware("http")
    async def wait_for_readiness(request: Request, call_next):
        context = getattr(request.app.state, "context", None)
        if context is not None and request.url.path not in UNGATED_PATHS:
            await context.wait_until_ready()
        return await call_next(request)

    # Exception Handlers
    @app.exception_handler(KeyServiceError)
    async def key_service_exception_handler(request: Request, exc: KeyServiceError):
        logger.error(
            "Key service request failed",
            exc_info=exc,
            extra={"kind": exc.kind.value, "path": request.url.path}
        )
        return JSONResponse(
            status_code=ERROR_STATUS[exc.kind],
            content=ErrorResponse(
                error=ErrorDetail(code="InternalServerError", message="Internal Server Error")
            ).model_dump()
        )

    # Include Routers
    app.include_router(auth.router, tags=["Auth"])
    app.include_router(wellknown.router, prefix="/.well-known", tags=["Discovery"])

    @app.get("/health")
    async def health_check(request: Request):
        context = getattr(request.app.state, "context", None)
        return {"status": "ok", "ready": bool(context and context.ready)}

    return app

app = create_app()

def run():
    setup_logging()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
