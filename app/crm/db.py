from __future__ import annotations

from contextlib import contextmanager
from collections.abc import Generator

from flask import Flask
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker


def init_db(app: Flask) -> None:
    db_url = app.config["DATABASE_URL"]
    is_postgres = db_url.startswith("postgres")
    engine_kwargs: dict[str, object] = {
        "future": True,
        "pool_pre_ping": True,
    }
    if is_postgres:
        engine_kwargs.update(
            {
                "pool_recycle": 1800,
                "pool_size": app.config.get("DB_POOL_SIZE", 5),
                "max_overflow": app.config.get("DB_MAX_OVERFLOW", 10),
                "pool_timeout": 30,
            }
        )
        timeout_ms = int(app.config.get("STATEMENT_TIMEOUT_MS") or 0)
        if timeout_ms > 0:
            # Applies to every statement, including each step of a delete transaction.
            engine_kwargs["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}
    engine = create_engine(db_url, **engine_kwargs)
    if app.config.get("ENV") != "production":
        @event.listens_for(engine, "checkout")
        def _receive_checkout(dbapi_connection, connection_record, connection_proxy):  # type: ignore[no-redef]
            app.logger.debug("DB connection checkout from pool")
    app.extensions["sqlalchemy_engine"] = engine
    app.extensions["sqlalchemy_sessionmaker"] = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@contextmanager
def transaction_scope(sm: sessionmaker) -> Generator[Session, None, None]:
    """
    Yields a session inside one transaction: commit on clean exit, rollback otherwise.
    Rollback also covers BaseException (worker timeouts, KeyboardInterrupt) so an
    interrupted caller never leaves the transaction open on a pooled connection.
    """
    s: Session = sm()
    try:
        yield s
        s.commit()
    except BaseException:
        s.rollback()
        raise
    finally:
        s.close()


@contextmanager
def session_scope(app: Flask) -> Generator[Session, None, None]:
    """
    Non-request helper for scripts and tests.
    """
    with transaction_scope(app.extensions["sqlalchemy_sessionmaker"]) as s:
        yield s
