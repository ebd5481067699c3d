"""Main FastAPI application."""
import json
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from app.settings import settings
from app.api.auth import router as auth_router
from app.api.friends import router as friends_router
from app.api.posts import router as posts_router
from app.api.chat import router as chat_router
from app.api.challenges import router as challenges_router
from app.api.habits import router as habits_router
from app.api.notifications import router as notifications_router
from app.api.badges import router as badges_router
from app.api.profile import router as profile_router
from app.api.utility import router as utility_router
from app.domain.common.errors import (
    NotFoundError as DomainNotFoundError,
    AuthenticationError as DomainAuthenticationError,
    AuthorizationError as DomainAuthorizationError,
    ValidationError as DomainValidationError,
    ConflictError as DomainConflictError,
)
from app.infra.db.base import Base, engine
# Import all models to ensure they're registered with Base
from app.infra.db.models import (  # noqa: F401
    UserModel,
    UserSettingsModel,
    FriendshipModel,
    BlockedUserModel,
    HabitModel,
    DailyActivityModel,
    PostModel,
    CommentModel,
    ChatRoomModel,
    ChatParticipantModel,
    MessageModel,
    ChallengeModel,
    ChallengeParticipantModel,
    NotificationModel,
    BadgeModel,
    UserBadgeModel,
    ReminderModel,
    PomodoroSettingsModel,
    PomodoroSessionModel,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        # Database might not be ready yet; requests will surface the error
        logger.warning("Could not connect to database during startup: %s", e)
        logger.warning("Make sure PostgreSQL is running and accessible.")

    yield

    # Shutdown
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

logger.info(f"🔧 CORS origins: {settings.cors_origins}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    max_age=3600,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        logger.info(f"📥 [SERVER REQUEST] {request.method} {request.url.path}")
        logger.debug(f"   Query params: {dict(request.query_params)}")
        if request.headers:
            # Don't log authorization header fully
            headers = dict(request.headers)
            if 'authorization' in headers:
                auth_header = headers['authorization']
                if auth_header.startswith('Bearer '):
                    token = auth_header[7:]
                    headers['authorization'] = f'Bearer {token[:12]}...' if len(token) > 12 else 'Bearer ***'
            logger.debug(f"   Headers: {headers}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"📤 [SERVER RESPONSE] {request.method} {request.url.path} - {response.status_code} ({process_time:.3f}s)")
        return response


# Add logging middleware AFTER CORS (CORS must be first)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed logging."""
    logger.error(f"❌ [VALIDATION ERROR] {request.method} {request.url.path}")
    body = getattr(exc, "body", None)
    if body:
        try:
            body_str = body.decode('utf-8') if isinstance(body, bytes) else json.dumps(body, default=str)
            logger.error(f"   Request body: {body_str}")
        except (TypeError, ValueError, UnicodeDecodeError) as e:
            logger.error(f"   Could not decode request body: {e}")

    errors = exc.errors()
    logger.error(f"   Validation errors ({len(errors)}):")
    for i, error in enumerate(errors, 1):
        logger.error(f"   Error {i}: {json.dumps(error, default=str)}")

    return JSONResponse(
        status_code=422,
        content={"detail": json.loads(json.dumps(errors, default=str))},
    )


# Domain error handlers: map domain exceptions to correct HTTP status
@app.exception_handler(DomainNotFoundError)
async def domain_not_found_handler(request: Request, exc: DomainNotFoundError):
    """Return 404 when a resource is not found."""
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(DomainAuthenticationError)
async def domain_authentication_handler(request: Request, exc: DomainAuthenticationError):
    """Return 401 for bad credentials."""
    return JSONResponse(status_code=401, content={"detail": exc.message})


@app.exception_handler(DomainAuthorizationError)
async def domain_authorization_handler(request: Request, exc: DomainAuthorizationError):
    """Return 403 when the user is not authorized."""
    logger.warning(f"⛔ [FORBIDDEN] {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(DomainValidationError)
async def domain_validation_handler(request: Request, exc: DomainValidationError):
    """Return 400 for domain validation errors."""
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(DomainConflictError)
async def domain_conflict_handler(request: Request, exc: DomainConflictError):
    """Return 409 for conflict errors."""
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log the traceback; never leak internals to the client."""
    logger.exception(f"💥 [UNHANDLED] {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Health check (root and under the API prefix)
@app.get("/health")
@app.get(f"{settings.api_prefix}/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": settings.app_version}


# Serve uploaded avatars (GET /uploads/avatars/...)
_upload_dir = Path(settings.upload_dir)
_upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(_upload_dir)), name="uploads")


app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(friends_router, prefix=settings.api_prefix)
app.include_router(posts_router, prefix=settings.api_prefix)
app.include_router(chat_router, prefix=settings.api_prefix)
app.include_router(challenges_router, prefix=settings.api_prefix)
app.include_router(habits_router, prefix=settings.api_prefix)
app.include_router(notifications_router, prefix=settings.api_prefix)
app.include_router(badges_router, prefix=settings.api_prefix)
app.include_router(profile_router, prefix=settings.api_prefix)
app.include_router(utility_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
