import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.core.config import CORS_ORIGINS, DATABASE_URL, DEFAULT_THEME_SETTING_KEY, DEFAULT_THEME_SLUG
from storefront.core.database import Base, SessionLocal, engine
from storefront.core.errors import PersistenceError, StorefrontError
from storefront.core.logging_setup import configure_logging
from storefront.core.startup_checks import ensure_migrations_applied, validate_database_environment
from storefront.middleware.observability import ObservabilityMiddleware
import storefront.models  # models must be registered before create_all
import storefront.services.event_handlers  # subscribes event bus handlers

from storefront.models.setting import Setting
from storefront.models.theme import Theme
from storefront.routers.admin_orders import router as admin_orders_router
from storefront.routers.admin_themes import router as admin_themes_router
from storefront.routers.contact import router as contact_router
from storefront.routers.internal_metrics import router as internal_metrics_router
from storefront.routers.orders import router as orders_router
from storefront.routers.revenue import router as revenue_router
from storefront.routers.settings import router as settings_router
from storefront.routers.storage import router as storage_router
from storefront.routers.themes import router as themes_router
from storefront.services.theme_admin import new_theme_form

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini")))


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Storefront API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    log = logger.error if isinstance(exc, PersistenceError) else logger.info
    log(
        "request rejected: %s",
        exc.message,
        extra={"endpoint": request.url.path, "method": request.method, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def _seed_default_theme() -> None:
    db = SessionLocal()
    try:
        if db.query(Theme).count():
            return
        values = new_theme_form()
        values.update(
            {
                "name": DEFAULT_THEME_SLUG.replace("_", " ").title(),
                "slug": DEFAULT_THEME_SLUG,
                "category": "default",
            }
        )
        db.add(Theme(**values))
        db.add(Setting(key=DEFAULT_THEME_SETTING_KEY, value=DEFAULT_THEME_SLUG))
        db.commit()
        logger.info("%s seeded default theme slug=%s", STARTUP_PREFIX, DEFAULT_THEME_SLUG)
    except Exception:
        db.rollback()
        logger.exception("%s default theme seed failed", STARTUP_PREFIX)
        raise
    finally:
        db.close()


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
            _seed_default_theme()
        ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


app.include_router(themes_router)
app.include_router(admin_themes_router)
app.include_router(orders_router)
app.include_router(admin_orders_router)
app.include_router(revenue_router)
app.include_router(settings_router)
app.include_router(contact_router)
app.include_router(storage_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
