"""FastAPI application: main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from portcullis.config import get_settings
from portcullis.core.exceptions import (
    AppError,
    app_error_handler,
    global_exception_handler,
    validation_exception_handler,
)
from portcullis.core.logging import configure_logging
from portcullis.core.middleware import setup_middleware
from portcullis.infrastructure.database import SessionLocal, create_tables, engine

# Import all models so SQLAlchemy knows about them
from portcullis.domain.models.invitation import Invitation  # noqa: F401
from portcullis.domain.models.password_reset_token import PasswordResetToken  # noqa: F401
from portcullis.domain.models.policy import Policy  # noqa: F401
from portcullis.domain.models.role import Privilege, Role, RolePrivilege  # noqa: F401
from portcullis.domain.models.user import User  # noqa: F401

# Import routers
from portcullis.interfaces.api.auth import router as auth_router
from portcullis.interfaces.api.invitations import router as invitations_router
from portcullis.interfaces.api.policies import router as policies_router
from portcullis.interfaces.api.privileges import router as privileges_router
from portcullis.interfaces.api.roles import router as roles_router
from portcullis.interfaces.api.status import router as status_router
from portcullis.interfaces.api.users import router as users_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting Portcullis", env=settings.ENVIRONMENT, version=settings.APP_VERSION)
    if settings.SECRET_KEY == "change-me" and settings.ENVIRONMENT != "development":
        logger.warning("SECRET_KEY is the development default; set a real key", env=settings.ENVIRONMENT)

    # Create DB tables (schema migrations are managed outside the app)
    await create_tables(engine)

    from portcullis.infrastructure.seed import seed_reference_data

    async with SessionLocal() as session:
        await seed_reference_data(session)

    if settings.SCHEDULER_ENABLED:
        from portcullis.scheduler.jobs import start_scheduler

        start_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from portcullis.scheduler.jobs import stop_scheduler

        stop_scheduler()
    await engine.dispose()
    logger.info("Portcullis stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description="Authentication, invitation-gated signup and role-based authorization API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Exception handling: typed application errors, malformed input, everything else
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS is added last so it runs first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(roles_router)
app.include_router(privileges_router)
app.include_router(invitations_router)
app.include_router(policies_router)
app.include_router(status_router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
