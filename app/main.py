import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.schemas.common import ValidationErrorResponse

settings = get_settings()
logger = logging.getLogger(__name__)

_LOGGING_CONFIGURED = False


def _configure_logging() -> None:
    """Install one root handler at LOG_LEVEL; safe to call more than once."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    _LOGGING_CONFIGURED = True


def _seed_admin_user() -> None:
    """Create the bootstrap administrator if it does not exist yet."""
    from app.database import SessionLocal
    from app.models.user import User
    from app.utils.constants import Role
    from app.utils.security import hash_password

    email = settings.ADMIN_EMAIL.strip().lower()
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == email).first()
        if admin is None:
            db.add(
                User(
                    email=email,
                    password_hash=hash_password(settings.ADMIN_PASSWORD),
                    first_name="System",
                    last_name="Administrator",
                    role=Role.ADMIN.value,
                    is_active=True,
                )
            )
            db.commit()
            logger.info("Bootstrap admin created: %s", email)
        else:
            logger.info("Bootstrap admin present: %s", email)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not seed bootstrap admin (has the schema been migrated?): %s", exc)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    _seed_admin_user()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error envelopes
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Validation failed on %s %s: %s", request.method, request.url.path, exc.errors())
    body = ValidationErrorResponse(errors=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get(f"{settings.API_PREFIX}/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from app.routers import auth  # noqa: E402

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])

# Budget ledger
from app.routers import budget  # noqa: E402

app.include_router(
    budget.router,
    prefix=f"{settings.API_PREFIX}/budget",
    tags=["Budget"],
)

# Expenses and project budget view
from app.routers import finance  # noqa: E402

app.include_router(
    finance.router,
    prefix=f"{settings.API_PREFIX}/finance",
    tags=["Finance"],
)

# In-app notifications
from app.routers import notifications  # noqa: E402

app.include_router(
    notifications.router,
    prefix=f"{settings.API_PREFIX}/notifications",
    tags=["Notifications"],
)

# Excel export
from app.routers import exports  # noqa: E402

app.include_router(
    exports.router,
    prefix=f"{settings.API_PREFIX}/export",
    tags=["Export"],
)
