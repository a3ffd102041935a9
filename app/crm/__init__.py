import logging
import os
import uuid

from flask import Flask, g, jsonify, request
from dotenv import load_dotenv

from app.crm import models  # noqa: F401  (register tables before module imports)
from app.crm.config import load_config
from app.crm.db import init_db
from app.crm.routes import bp as routes_bp
from app.crm.modules.customers.routes import bp as customers_bp
from app.crm.modules.customers.service import CustomerService
from app.crm.modules.customers.store import CustomerStore


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        # Already configured (gunicorn, pytest, repeated create_app calls).
        root.setLevel(getattr(logging, level, logging.INFO))
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    _setup_logging(app.config["LOG_LEVEL"])

    # Customer names are not ASCII; emit them as UTF-8 instead of \u escapes.
    app.json.ensure_ascii = False  # type: ignore[attr-defined]

    # Startup guardrails (fail fast with clear logs)
    if not app.config.get("DATABASE_URL"):
        raise RuntimeError("DB_CONNECTION_URL (or DATABASE_URL) env variable does not exist")
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production") and str(app.config["DATABASE_URL"]).startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose(close=False)
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    store = CustomerStore(app.extensions["sqlalchemy_sessionmaker"])
    app.extensions["customer_service"] = CustomerService(store)

    app.register_blueprint(routes_bp)
    app.register_blueprint(customers_bp)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    @app.after_request
    def _echo_request_id(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers["X-Request-ID"] = rid
        return response

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def _err_405(e):  # type: ignore[no-redef]
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return jsonify({"error": "Internal server error"}), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
