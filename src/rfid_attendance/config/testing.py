import os
import tempfile

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "library_system_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

HOST = "127.0.0.1"
PORT = 3000

SERIAL_ENABLED = False
SERIAL_PORT = "loop://"
SERIAL_BAUDRATE = 9600
SCAN_TIMEOUT_SECONDS = 5

SCHEDULER_ENABLED = False
TIMEZONE = "Asia/Kolkata"
AUTO_LOGOUT_TIME = "18:00:00"
AUTO_LOGOUT_HOUR = 18
AUTO_LOGOUT_MINUTE = 5

UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "rfid-attendance-test-uploads")

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
