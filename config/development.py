import os

from config import env_flag, env_int_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "store_ops"),
    "ssl_ca": os.getenv("DB_SSL_CA") or None,
    "ssl_disabled": env_flag("DB_SSL_DISABLED", "1"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# schema.sql is idempotent (CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

# "store": a register counts only its own store's cash sales.
# "shared_till": stores listed in SHARED_TILL_STORE_IDS share one cash drawer.
CASH_SALES_SCOPE = os.getenv("CASH_SALES_SCOPE", "store")
SHARED_TILL_STORE_IDS = env_int_list("SHARED_TILL_STORE_IDS", "1,2,3,4")

# "update" or "reject"
REOPEN_POLICY = os.getenv("REOPEN_POLICY", "update")
