"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

SCAN_LINE_PREFIX = "RFID Tag UID:"
DEFAULT_SCAN_TIMEOUT_SECONDS = 5
DEFAULT_SERIAL_PORT = "COM14"
DEFAULT_SERIAL_BAUDRATE = 9600

# Sessions still open at the end of the day are closed at this time.
DEFAULT_AUTO_LOGOUT_TIME = time(18, 0, 0)
DEFAULT_AUTO_LOGOUT_HOUR = 18
DEFAULT_AUTO_LOGOUT_MINUTE = 5
DEFAULT_TIMEZONE = "Asia/Kolkata"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
