"""Schema/seed helpers used by the app factory and the scripts/ folder."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
SEED_PATH = Path(__file__).resolve().parent / "seed.sql"

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")


def split_sql(sql: str) -> Iterator[str]:
    """Split a script on `;`, ignoring semicolons inside quoted literals."""

    quote = None
    start = 0
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=config.host, port=config.port, user=config.user, password=config.password, use_pure=True)
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


def _run_script(config: DBConfig, path: Path) -> None:
    # The script may target another DB name; the configured one always wins.
    sql = _CREATE_DB_OR_USE.sub("", Path(path).read_text(encoding="utf-8"))
    conn = _connect(config)
    try:
        cur = conn.cursor()
        for stmt in split_sql(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    _run_script(DBConfig.from_dict(db_config), Path(schema_path))


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    _run_script(DBConfig.from_dict(db_config), Path(seed_path))


def ensure_admin(db_config: dict, *, username: str, password: str, full_name: str = "Administrator") -> None:
    """Create the admin account, or reset its password if it already exists."""

    config = DBConfig.from_dict(db_config)
    password_hash = generate_password_hash(password)
    conn = _connect(config)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO admins (username, full_name, password_hash, is_active)
            VALUES (%s, %s, %s, 1)
            ON DUPLICATE KEY UPDATE password_hash=VALUES(password_hash), is_active=1
            """,
            (username, full_name, password_hash),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Admin account %r is ready", username)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
