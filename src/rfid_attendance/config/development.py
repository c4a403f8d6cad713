import os
from pathlib import Path

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "library_system"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Card reader (Arduino + RC522) on a serial port.
SERIAL_ENABLED = bool(int(os.getenv("SERIAL_ENABLED", "1")))
SERIAL_PORT = os.getenv("SERIAL_PORT", "COM14")
SERIAL_BAUDRATE = int(os.getenv("SERIAL_BAUDRATE", "9600"))
SCAN_TIMEOUT_SECONDS = float(os.getenv("SCAN_TIMEOUT_SECONDS", "5"))

# End-of-day auto logout: runs at AUTO_LOGOUT_HOUR:AUTO_LOGOUT_MINUTE, stamps AUTO_LOGOUT_TIME.
SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
AUTO_LOGOUT_TIME = os.getenv("AUTO_LOGOUT_TIME", "18:00:00")
AUTO_LOGOUT_HOUR = int(os.getenv("AUTO_LOGOUT_HOUR", "18"))
AUTO_LOGOUT_MINUTE = int(os.getenv("AUTO_LOGOUT_MINUTE", "5"))

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", str(Path.cwd() / "uploads"))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed programs/departments and the admin account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
