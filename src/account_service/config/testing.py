SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

USER_STORE = "memory"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "account_db_test",
}

AUTO_INIT_DB = False

MAIL_SERVER = ""
MAIL_PORT = 587
MAIL_USERNAME = ""
MAIL_PASSWORD = ""
MAIL_SENDER = "no-reply@test.local"
MAIL_USE_TLS = False
PASSWORD_RESET_URL = ""
