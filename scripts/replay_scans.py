"""Feed reader lines from stdin (or a file) through the scan service, without Flask.

Useful to exercise a database without the card reader attached::

    echo "RFID Tag UID: 04 A3 5B 1A" | python scripts/replay_scans.py
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys

from dotenv import load_dotenv

from rfid_attendance.config import get_settings_module
from rfid_attendance.container import build_container
from rfid_attendance.reader.serial_reader import parse_uid_line


class StdoutBroadcaster:
    def emit(self, event: str, payload: dict) -> None:
        print(event, json.dumps(payload))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("file", nargs="?", type=argparse.FileType("r"), default=sys.stdin)
    parser.add_argument("--no-debounce", action="store_true", help="process repeated UIDs immediately")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        broadcaster=StdoutBroadcaster(),
        scan_timeout_seconds=settings.SCAN_TIMEOUT_SECONDS,
        timezone=settings.TIMEZONE,
    )

    handle = container.scan_service.handle_scan if args.no_debounce else container.scan_service.submit
    for line in args.file:
        uid = parse_uid_line(line)
        if uid:
            handle(uid)


if __name__ == "__main__":
    main()
