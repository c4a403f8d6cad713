from __future__ import annotations

import importlib
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.broadcast import SocketIOBroadcaster
from .attendance.controller import register as register_attendance
from .cards.controller import register as register_cards
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin, list_tables
from .extensions import socketio
from .reader.serial_reader import SerialCardReader
from .reports.controller import register as register_reports
from .scheduling.jobs import build_scheduler, run_startup_cleanup
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config)
        password = getattr(settings, "ADMIN_PASSWORD", "")
        if password:
            ensure_admin(db_config, username=getattr(settings, "ADMIN_USERNAME", "admin"), password=password)
        else:
            logger.warning("ADMIN_PASSWORD is empty; admin account not seeded")
        logger.info("Seed data ready")


def _start_background_services(app: Flask, container: Container) -> None:
    cfg = app.config

    if cfg["SCHEDULER_ENABLED"]:
        run_startup_cleanup(container.auto_logout_service)
        scheduler = build_scheduler(
            container.auto_logout_service,
            hour=cfg["AUTO_LOGOUT_HOUR"],
            minute=cfg["AUTO_LOGOUT_MINUTE"],
            timezone=cfg["TIMEZONE"],
        )
        scheduler.start()
        app.extensions["scheduler"] = scheduler
        logger.info(
            "Auto-logout scheduled daily at %02d:%02d (%s)",
            cfg["AUTO_LOGOUT_HOUR"],
            cfg["AUTO_LOGOUT_MINUTE"],
            cfg["TIMEZONE"],
        )

    if cfg["SERIAL_ENABLED"]:
        reader = SerialCardReader(
            cfg["SERIAL_PORT"],
            container.scan_service.submit,
            baudrate=cfg["SERIAL_BAUDRATE"],
        )
        reader.start()
        app.extensions["card_reader"] = reader


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__, template_folder=str(PACKAGE_DIR / "templates"), static_folder=str(PACKAGE_DIR / "static"))
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.permanent_session_lifetime = timedelta(days=7)
    db_config = getattr(settings, "DB_CONFIG")

    app.config.update(
        DEBUG=bool(getattr(settings, "DEBUG", False)),
        TESTING=bool(getattr(settings, "TESTING", False)),
        UPLOAD_FOLDER=getattr(settings, "UPLOAD_FOLDER"),
        SERIAL_ENABLED=bool(getattr(settings, "SERIAL_ENABLED", False)),
        SERIAL_PORT=getattr(settings, "SERIAL_PORT"),
        SERIAL_BAUDRATE=int(getattr(settings, "SERIAL_BAUDRATE", 9600)),
        SCHEDULER_ENABLED=bool(getattr(settings, "SCHEDULER_ENABLED", False)),
        TIMEZONE=getattr(settings, "TIMEZONE"),
        AUTO_LOGOUT_HOUR=int(getattr(settings, "AUTO_LOGOUT_HOUR")),
        AUTO_LOGOUT_MINUTE=int(getattr(settings, "AUTO_LOGOUT_MINUTE")),
        HOST=getattr(settings, "HOST", "0.0.0.0"),
        PORT=int(getattr(settings, "PORT", 3000)),
    )

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    socketio.init_app(app)

    if container is None:
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            broadcaster=SocketIOBroadcaster(socketio),
            scan_timeout_seconds=float(getattr(settings, "SCAN_TIMEOUT_SECONDS", 5)),
            auto_logout_time=datetime.strptime(getattr(settings, "AUTO_LOGOUT_TIME", "18:00:00"), "%H:%M:%S").time(),
            timezone=app.config["TIMEZONE"],
        )
    app.extensions["rfid_container"] = container

    register_attendance(app, container)
    register_cards(app, container)
    register_users(app, container)
    register_reports(app, container)

    if not app.config["TESTING"]:
        _start_background_services(app, container)

    return app


def run() -> None:
    app = create_app()
    logger.info("Server running! Dashboard is at http://localhost:%s", app.config["PORT"])
    socketio.run(
        app,
        host=app.config["HOST"],
        port=app.config["PORT"],
        debug=app.config["DEBUG"],
        use_reloader=False,
        allow_unsafe_werkzeug=True,
    )
