# fechou/core/config.py

import os
from dotenv import load_dotenv
from fechou.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()

# =====================================================
# APPLICATION
# =====================================================
APP_ENV = os.getenv("APP_ENV")
if APP_ENV not in {"development", "staging", "production"}:
    raise ValueError("APP_ENV must be development | staging | production")

IS_PRODUCTION = APP_ENV == "production"

PUBLIC_APP_URL = os.getenv("PUBLIC_APP_URL", "https://www.fechou.com.br").rstrip("/")

# =====================================================
# DATABASE
# =====================================================
DB_TYPE = os.getenv("DB_TYPE")
if DB_TYPE not in {"postgres", "sqlite"}:
    raise ValueError("DB_TYPE must be postgres | sqlite")

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres")

elif DB_TYPE == "sqlite":
    if IS_PRODUCTION:
        raise ValueError("SQLite is NOT allowed in production")
    SQLITE_PATH = os.getenv("SQLITE_PATH", "./fechou.db")
    DATABASE_URL = f"sqlite+aiosqlite:///{SQLITE_PATH}"

# ---- Pool tuning ----
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 10))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 5))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", 30))
DB_ECHO_POOL = os.getenv("DB_ECHO_POOL", "false").lower() == "true"

# ---- SSL ----
DB_SSL_VERIFY = os.getenv("DB_SSL_VERIFY", "true").lower() == "true"
if IS_PRODUCTION and not DB_SSL_VERIFY:
    logger.warning("Running in production with relaxed SSL verification")

# ---- Transient error retry ----
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", 3))
DB_RETRY_DELAY_SECONDS = float(os.getenv("DB_RETRY_DELAY_SECONDS", 0.5))

# =====================================================
# JWT / AUTH
# =====================================================
AUTH_PROVIDER = os.getenv("AUTH_PROVIDER", "local")
if AUTH_PROVIDER not in {"local", "firebase"}:
    raise ValueError("AUTH_PROVIDER must be local | firebase")

FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS")
if AUTH_PROVIDER == "firebase" and not FIREBASE_CREDENTIALS:
    raise ValueError("FIREBASE_CREDENTIALS is required when AUTH_PROVIDER=firebase")

JWT_ACCESS_SECRET_KEY = os.getenv("JWT_ACCESS_SECRET_KEY")
if not JWT_ACCESS_SECRET_KEY:
    raise ValueError("JWT_ACCESS_SECRET_KEY must be set")

JWT_ALGORITHM = "HS256"

ACCESS_TOKEN_EXPIRE_MINUTES = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
)
REFRESH_TOKEN_EXPIRE_DAYS = int(
    os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 7)
)

# =====================================================
# PLANS
# =====================================================
FREE_QUOTES_LIMIT = int(os.getenv("FREE_QUOTES_LIMIT", 5))
PREMIUM_QUOTES_LIMIT = 999999
FREE_VISIBLE_QUOTES = int(os.getenv("FREE_VISIBLE_QUOTES", 5))
PREMIUM_PLAN_DAYS = int(os.getenv("PREMIUM_PLAN_DAYS", 30))
REFERRAL_PREMIUM_DAYS = int(os.getenv("REFERRAL_PREMIUM_DAYS", 15))
REFERRAL_BONUS_QUOTES = int(os.getenv("REFERRAL_BONUS_QUOTES", 1))

# =====================================================
# HTTP
# =====================================================
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()
]
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "false").lower() == "true"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
