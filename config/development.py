import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply database/schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Create the demo tenant and admin/admin123 account
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

MONTHLY_CACHE_ENABLED = bool(int(os.getenv("MONTHLY_CACHE_ENABLED", "1")))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
