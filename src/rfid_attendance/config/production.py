import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "library_system"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

SERIAL_ENABLED = bool(int(os.getenv("SERIAL_ENABLED", "1")))
SERIAL_PORT = os.getenv("SERIAL_PORT", "/dev/ttyUSB0")
SERIAL_BAUDRATE = int(os.getenv("SERIAL_BAUDRATE", "9600"))
SCAN_TIMEOUT_SECONDS = float(os.getenv("SCAN_TIMEOUT_SECONDS", "5"))

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
AUTO_LOGOUT_TIME = os.getenv("AUTO_LOGOUT_TIME", "18:00:00")
AUTO_LOGOUT_HOUR = int(os.getenv("AUTO_LOGOUT_HOUR", "18"))
AUTO_LOGOUT_MINUTE = int(os.getenv("AUTO_LOGOUT_MINUTE", "5"))

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/var/tmp/rfid-attendance-uploads")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
