import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gestao_test"),
}

STORE_BACKEND = "memory"

TOKEN_MAX_AGE_SECONDS = 3600
IMPORT_CHUNK_SIZE = 2

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = True

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
