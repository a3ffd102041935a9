"""
Release-phase helper.

Goal:
- Fail fast if the database URL is missing (avoid silently using SQLite in prod).
- Run alembic migrations up to head (creates and seeds the customer table).

Usage:
  python scripts/release.py
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def run_release() -> None:
    from app.crm.config import load_settings

    settings = load_settings()
    db_url = settings.database_url
    if not db_url:
        raise RuntimeError("Missing required environment variable DB_CONNECTION_URL (or DATABASE_URL).")
    # Guardrail: prevent accidental prod deploys against SQLite.
    if settings.env in ("prod", "production") and db_url.startswith("sqlite"):
        raise RuntimeError("Refusing to run release on sqlite DATABASE_URL in production. Set DATABASE_URL to Postgres.")

    print("=== customer service release start ===", flush=True)
    print(f"ENV={settings.env or '(unset)'}", flush=True)
    print("Running Alembic migrations...", flush=True)

    from alembic import command
    from scripts.migrate import alembic_config

    command.upgrade(alembic_config(db_url), "head")
    print("Migrations complete.", flush=True)
    print("=== customer service release done ===", flush=True)


def main() -> None:
    run_release()


if __name__ == "__main__":
    main()
