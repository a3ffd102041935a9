from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from app.crm.modules.customers.errors import QueryError, TransactionError, ValidationError
from app.crm.modules.customers.service import CustomerService, split_prefixes

bp = Blueprint("customers", __name__)


def _service() -> CustomerService:
    return current_app.extensions["customer_service"]


def _prefix_arg() -> str | None:
    raw = request.args.get("prefix") or ""
    return raw if raw.strip() else None


@bp.get("/customers")
def customers_get():
    raw = _prefix_arg()
    if raw is None:
        return jsonify({"error": "prefix parameter is required"}), 400
    customers = _service().get(split_prefixes(raw))
    return jsonify([c.to_dict() for c in customers])


@bp.delete("/customers")
def customers_delete():
    raw = _prefix_arg()
    if raw is None:
        return jsonify({"error": "prefix parameter is required"}), 400
    result = _service().delete(raw)
    return jsonify(result.to_dict())


@bp.errorhandler(ValidationError)
def _validation_error(e: ValidationError):
    return jsonify({"error": e.message}), 400


@bp.errorhandler(QueryError)
def _query_error(e: QueryError):
    current_app.logger.exception("Error getting customers (request_id=%s)", getattr(g, "request_id", None))
    return jsonify({"error": "Failed to get customers"}), 500


@bp.errorhandler(TransactionError)
def _transaction_error(e: TransactionError):
    current_app.logger.exception("Error deleting customers (request_id=%s)", getattr(g, "request_id", None))
    return jsonify({"error": "Failed to delete customers"}), 500
