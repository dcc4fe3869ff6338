import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

# Fixed business offset used for every civil <-> instant conversion
BUSINESS_UTC_OFFSET = os.getenv("BUSINESS_UTC_OFFSET", "+09:00")

ALLOCATION_EPSILON = float(os.getenv("ALLOCATION_EPSILON", "1e-9"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, schema.sql is applied on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
