import os
from dotenv import load_dotenv

# Loads .env from the project root
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_TEST = ENV_NORMALIZED == "test"
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

# Identity (JWT)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ADMIN_ROLES = {"admin", "owner"}

# Themes
DEFAULT_THEME_SLUG = os.getenv("DEFAULT_THEME_SLUG", "light").strip() or "light"
DEFAULT_THEME_SETTING_KEY = "default_website_theme"
THEME_COOKIE_NAME = "current_theme_slug"
THEME_COOKIE_MAX_AGE_SECONDS = int(os.getenv("THEME_COOKIE_MAX_AGE_SECONDS", str(60 * 60 * 24 * 365)))

# Object storage (S3 compatible)
STORAGE_PUBLIC_BASE_URL = os.getenv("STORAGE_PUBLIC_BASE_URL", "").strip().rstrip("/")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "project-images").strip() or "project-images"
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL", "").strip()
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID", "").strip()
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY", "").strip()
STORAGE_REGION = os.getenv("STORAGE_REGION", "auto").strip() or "auto"
SIGNED_URL_TTL_SECONDS = int(os.getenv("SIGNED_URL_TTL_SECONDS", "60"))
