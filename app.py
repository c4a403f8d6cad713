"""Development entry point: `python app.py` (same as `python -m rfid_attendance`)."""

from rfid_attendance.main import run

if __name__ == "__main__":
    run()
