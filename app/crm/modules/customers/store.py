"""
Customer store: all SQL for the `customer` table lives here.

Two operations:
- search(prefixes): rows whose first_name starts with any prefix, ordered by id.
- delete(prefixes): two-phase delete in one transaction. Phase 1 selects the ids
  that match, phase 2 deletes by the same predicate. The reported ids come from
  phase 1; if phase 2 removes a different number of rows the transaction is
  rolled back, so the result always describes exactly what was deleted.

Errors are raised as QueryError / TransactionError with the SQLAlchemy error
chained as __cause__. Nothing is retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.crm.db import transaction_scope
from app.crm.modules.customers.errors import QueryError, TransactionError
from app.crm.modules.customers.filters import PrefixPredicate, build_prefix_filter
from app.crm.modules.customers.models import CustomerInfo, DeleteInfo

logger = logging.getLogger(__name__)

_CUSTOMER_COLUMNS = ("id", "first_name", "last_name", "patronymic_name", "phone", "email")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


class CustomerStore:
    def __init__(self, sm: sessionmaker) -> None:
        self._sessionmaker = sm

    def search(self, prefixes: Sequence[str]) -> list[CustomerInfo]:
        predicate = build_prefix_filter(prefixes)
        sql = text(
            f"SELECT {', '.join(_CUSTOMER_COLUMNS)} FROM customer "
            f"WHERE {predicate.sql} ORDER BY id"
        )
        try:
            with self._sessionmaker() as s:
                rows = s.execute(sql, predicate.bind()).mappings().all()
        except SQLAlchemyError as e:
            logger.error("Customer search failed (prefixes=%s): %s", list(prefixes), e)
            raise QueryError("search", f"failed to execute query: {e}") from e
        return [self._row_to_customer(row) for row in rows]

    def delete(self, prefixes: Sequence[str]) -> DeleteInfo:
        predicate = build_prefix_filter(prefixes)
        try:
            with transaction_scope(self._sessionmaker) as s:
                ids = self._select_ids(s, predicate)
                removed = self._delete_matching(s, predicate)
                if removed != len(ids):
                    raise TransactionError(
                        "delete",
                        f"selected {len(ids)} customers but delete affected {removed} rows; rolled back",
                    )
        except (SQLAlchemyError, TypeError, ValueError) as e:
            logger.error("Customer delete rolled back (prefixes=%s): %s", list(prefixes), e)
            raise TransactionError("delete", f"transaction failed: {e}") from e
        except TransactionError:
            logger.error("Customer delete rolled back (prefixes=%s): row count mismatch", list(prefixes))
            raise
        logger.info("Deleted %s customers (ids=%s)", len(ids), ids)
        return DeleteInfo(count=len(ids), ids=ids)

    @staticmethod
    def _select_ids(s: Session, predicate: PrefixPredicate) -> list[int]:
        sql = text(f"SELECT id FROM customer WHERE {predicate.sql} ORDER BY id")
        return [int(row[0]) for row in s.execute(sql, predicate.bind())]

    @staticmethod
    def _delete_matching(s: Session, predicate: PrefixPredicate) -> int:
        result = s.execute(text(f"DELETE FROM customer WHERE {predicate.sql}"), predicate.bind())
        return result.rowcount

    @staticmethod
    def _row_to_customer(row: Mapping[str, Any]) -> CustomerInfo:
        try:
            raw_id = row["id"]
            if raw_id is None:
                raise ValueError("id is NULL")
            return CustomerInfo(
                id=int(raw_id),
                first_name=_optional_str(row["first_name"]),
                last_name=_optional_str(row["last_name"]),
                patronymic_name=_optional_str(row["patronymic_name"]),
                phone=_optional_str(row["phone"]),
                email=_optional_str(row["email"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise QueryError("search", f"failed to decode customer row: {e}") from e
