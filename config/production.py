import os

from config import env_flag, env_int_list

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "store_ops"),
    "ssl_ca": os.getenv("DB_SSL_CA") or None,
    "ssl_disabled": env_flag("DB_SSL_DISABLED", "0"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

CASH_SALES_SCOPE = os.getenv("CASH_SALES_SCOPE", "store")
SHARED_TILL_STORE_IDS = env_int_list("SHARED_TILL_STORE_IDS", "1,2,3,4")
REOPEN_POLICY = os.getenv("REOPEN_POLICY", "update")
