from __future__ import annotations

import importlib

from dotenv import load_dotenv

from rfid_attendance.config import get_settings_module
from rfid_attendance.database.bootstrap import apply_seed_sql, ensure_admin


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    if not settings.ADMIN_PASSWORD:
        raise SystemExit("ADMIN_PASSWORD is empty; set it before seeding the admin account.")
    ensure_admin(db_config, username=settings.ADMIN_USERNAME, password=settings.ADMIN_PASSWORD)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
