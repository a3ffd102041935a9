#!/usr/bin/env python3
"""
Production startup script.

1. Runs migrations (release.py)
2. Starts gunicorn (replaces this process via os.execvp)

Usage:
    python scripts/start.py

Environment:
    DB_CONNECTION_URL / DATABASE_URL  required
    PORT                              listen port (default 3322)
    WEB_CONCURRENCY                   gunicorn workers (default 2)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def resolve_port(raw: str | None) -> int:
    port = (raw or "").strip()
    if not port:
        print("WARNING: PORT not set, using default 3322", flush=True)
        return 3322
    try:
        port_int = int(port)
    except ValueError:
        raise ValueError(f"Invalid PORT value '{port}'. Must be integer 1-65535.")
    if port_int < 1 or port_int > 65535:
        raise ValueError(f"Invalid PORT value '{port}'. Must be integer 1-65535.")
    return port_int


def main() -> None:
    try:
        port = resolve_port(os.environ.get("PORT"))
    except ValueError as e:
        print(f"ERROR: {e}", flush=True)
        sys.exit(1)
    print(f"PORT={port} validated", flush=True)

    print("=== Running release phase ===", flush=True)
    from scripts.release import run_release
    try:
        run_release()
    except Exception as e:
        print(f"Release failed: {e}", flush=True)
        sys.exit(1)

    workers = (os.environ.get("WEB_CONCURRENCY") or "2").strip()
    print("=== Starting gunicorn ===", flush=True)
    print(f"REST API started at {port}...", flush=True)

    # exec keeps gunicorn as PID 1 so it receives signals directly
    os.execvp(
        "gunicorn",
        [
            "gunicorn",
            "app.wsgi:app",
            "--bind", f"0.0.0.0:{port}",
            "--workers", workers,
            "--timeout", "60",
            "--access-logfile", "-",
            "--error-logfile", "-",
        ],
    )


if __name__ == "__main__":
    main()
