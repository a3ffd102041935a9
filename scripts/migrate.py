#!/usr/bin/env python3
"""
Schema migration CLI (Alembic under the hood).

Usage:
    python scripts/migrate.py migrate              # upgrade to head
    python scripts/migrate.py migrate <revision>   # upgrade to a given revision
    python scripts/migrate.py rollback             # downgrade one revision
    python scripts/migrate.py rollback <revision>  # downgrade to a given revision
    python scripts/migrate.py                      # no-op

Environment:
    DB_CONNECTION_URL or DATABASE_URL (required)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402

from app.crm.config import load_settings  # noqa: E402

logger = logging.getLogger("migrate")


def alembic_config(db_url: str) -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def run(cfg: Config, cmd: str | None, revision: str | None = None) -> None:
    if cmd == "migrate":
        target = revision or "head"
        logger.info("start migration to %s", target)
        command.upgrade(cfg, target)
        logger.info("migration migrate ok")
    elif cmd == "rollback":
        target = revision or "-1"
        logger.info("start rollback to %s", target)
        command.downgrade(cfg, target)
        logger.info("migration rollback ok")
    else:
        logger.info("migration run without any action")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply or roll back customer schema migrations.")
    parser.add_argument("command", nargs="?", choices=("migrate", "rollback"))
    parser.add_argument("revision", nargs="?", help="target revision id (default: head / one step back)")
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    db_url = load_settings().database_url
    if not db_url:
        logger.error("DB_CONNECTION_URL (or DATABASE_URL) env variable does not exist")
        return 1

    try:
        run(alembic_config(db_url), args.command, args.revision)
    except Exception:
        logger.exception("migration error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
