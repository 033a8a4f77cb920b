import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "choir_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Bearer tokens stay valid for 7 days unless overridden.
TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(7 * 24 * 60 * 60)))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also make sure the President account exists
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "president")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "president123")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "president@choir.local")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Choir President")
