import asyncio
import contextlib
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pythonjsonlogger import jsonlogger

from vortex_auth.adapter.database import create_database
from vortex_auth.adapter.services.email_dispatcher import create_email_dispatcher
from vortex_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from vortex_auth.api.middleware.rate_limit import (
    RateLimitMiddleware,
    SlidingWindowRateLimiter,
    run_sweeper,
)
from vortex_auth.api.middleware.security_headers import SecurityHeadersMiddleware
from vortex_auth.api.utils.jwt import JWTManager
from vortex_auth.app.services.password_hasher import PasswordHasher
from vortex_auth.app.use_cases.maintenance import CleanupExpiredTokensUseCase
from vortex_auth.config import validate_config
from .error import ClientError, ServerError
from .responses import (
    INTERNAL_ERROR,
    INVALID_BODY,
    VALIDATION_FAILED,
    error_body,
    internal_error_response,
    is_malformed_body,
    validation_details,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
JSON_RENAMED_FIELDS = {"levelname": "level", "asctime": "timestamp"}
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def build_log_formatter(environment: str) -> logging.Formatter:
    """Readable lines in development, one JSON object per line elsewhere"""
    if environment == "development":
        return logging.Formatter(LOG_FORMAT)
    return jsonlogger.JsonFormatter(JSON_LOG_FORMAT, rename_fields=JSON_RENAMED_FIELDS)


def configure_logging(level: str, environment: str = "development") -> None:
    """Root stream handler; unknown level names fall back to INFO"""
    handler = logging.StreamHandler()
    handler.setFormatter(build_log_formatter(environment))
    logging.basicConfig(level=LOG_LEVELS.get(str(level).lower(), logging.INFO), handlers=[handler])


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error on {request.url.path}: {exc.base_error.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.base_error.message, exc.base_error.code),
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error on {request.url.path}: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR, exc.base_error.code),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if is_malformed_body(errors):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(INVALID_BODY))

    details = [detail.model_dump() for detail in validation_details(errors)]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": VALIDATION_FAILED, "details": details},
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return internal_error_response()


async def run_cleanup(app: FastAPI) -> None:
    """One maintenance pass on a fresh session"""
    database = app.state.database
    async with database.session_factory() as session:
        result = await CleanupExpiredTokensUseCase(SqlAlchemyUnitOfWork(session, database)).execute()
    if result.is_err():
        logger.error(f"Cleanup failed: {result.error.message}")


async def run_cleanup_loop(app: FastAPI, interval_minutes: int) -> None:
    while True:
        await asyncio.sleep(interval_minutes * 60)
        await run_cleanup(app)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    config = app.state.config
    await app.state.database.create_all()

    tasks = [asyncio.create_task(run_sweeper(app.state.rate_limiter))]
    if config.CLEANUP_INTERVAL_MINUTES > 0:
        tasks.append(asyncio.create_task(run_cleanup_loop(app, config.CLEANUP_INTERVAL_MINUTES)))

    try:
        yield
    finally:
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await app.state.database.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    validate_config(ApplicationConfig)
    configure_logging(ApplicationConfig.LOG_LEVEL, ApplicationConfig.ENVIRONMENT)

    app = FastAPI(title="Vortex Auth API", version="1.0.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.database = create_database(ApplicationConfig)
    app.state.jwt_manager = JWTManager(ApplicationConfig.JWT_SECRET, ApplicationConfig.JWT_EXPIRY_HOURS)
    app.state.password_hasher = PasswordHasher(ApplicationConfig.BCRYPT_ROUNDS)
    app.state.email_dispatcher = create_email_dispatcher(ApplicationConfig)
    app.state.rate_limiter = SlidingWindowRateLimiter(
        window_seconds=ApplicationConfig.RATE_LIMIT_REQUESTS * 60,
        burst=ApplicationConfig.RATE_LIMIT_BURST,
    )

    # Last added runs first: security headers wrap everything, including 429s
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
        expose_headers=["Link"],
        max_age=300,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    from vortex_auth.api.routes import auth, health_check, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(user.router, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.info(f"Application configured for {ApplicationConfig.ENVIRONMENT}")
    return app
