"""
Input validation in front of CustomerStore.

get(prefixes)      -- prefixes arrive already split by the transport; reject an
                      empty list or a blank element, otherwise pass through.
delete(raw_prefix) -- raw comma-separated filter; split, trim, reject blanks.

A blank prefix would turn into `LIKE '%'` and match every row, so it is always
a ValidationError here, never a match-all.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from app.crm.modules.customers.errors import ValidationError
from app.crm.modules.customers.models import CustomerInfo, DeleteInfo

logger = logging.getLogger(__name__)


class CustomerRepository(Protocol):
    def search(self, prefixes: Sequence[str]) -> list[CustomerInfo]: ...

    def delete(self, prefixes: Sequence[str]) -> DeleteInfo: ...


def split_prefixes(raw_prefix: str) -> list[str]:
    """Split a comma-separated filter and trim each segment (no validation)."""
    return [part.strip() for part in raw_prefix.split(",")]


class CustomerService:
    def __init__(self, repository: CustomerRepository) -> None:
        self._repository = repository

    def get(self, prefixes: Sequence[str]) -> list[CustomerInfo]:
        if not prefixes:
            raise ValidationError("get", "prefix cannot be empty")
        if any(not p.strip() for p in prefixes):
            raise ValidationError("get", "invalid empty prefix in the list")
        customers = self._repository.search(prefixes)
        logger.info("Found %s customers for %s prefix(es)", len(customers), len(prefixes))
        return customers

    def delete(self, raw_prefix: str) -> DeleteInfo:
        if not raw_prefix:
            raise ValidationError("delete", "prefix cannot be empty")
        prefixes = split_prefixes(raw_prefix)
        if any(not p for p in prefixes):
            raise ValidationError("delete", "invalid empty prefix in the list")
        return self._repository.delete(prefixes)
