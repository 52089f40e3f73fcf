import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from src.adapter.services.bcrypt_hasher import BcryptHasher
from src.adapter.services.jwt_token_service import JwtTokenService
from src.app.services.auth_settings import AuthSettings
from src.app.services.session_issuer import SessionIssuer
from src.depends import create_session_factory
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    if exc.status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        error_dict["message"] = "Service temporarily unavailable"
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
    )
    return response


def create_app(ApplicationConfig) -> FastAPI:
    logging.getLogger("src").setLevel(ApplicationConfig.LOG_LEVEL)

    settings = AuthSettings.from_config(ApplicationConfig)
    engine, session_factory = create_session_factory(ApplicationConfig.DB_URI)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database schema ready")
        yield
        await engine.dispose()

    app = FastAPI(title="Session API", version="0.1.0", lifespan=lifespan)

    token_service = JwtTokenService(settings)
    app.state.session_factory = session_factory
    app.state.token_service = token_service
    app.state.password_hasher = BcryptHasher(settings.password_hash_rounds)
    app.state.session_issuer = SessionIssuer(
        tokens=token_service,
        token_hasher=BcryptHasher(settings.token_hash_rounds),
        refresh_ttl=settings.refresh_ttl,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(log_requests)

    from src.api.routes import auth, health_check, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(user.router, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
