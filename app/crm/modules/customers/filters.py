from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.crm.modules.customers.errors import ValidationError


@dataclass(frozen=True)
class PrefixPredicate:
    """
    Disjunctive `first_name LIKE` predicate over bound parameters.

    `sql` only ever contains placeholders (`:p1`, `:p2`, ...); the prefix values
    live in `params`, in the same order as the clauses.
    """

    sql: str
    params: tuple[str, ...]

    def bind(self) -> dict[str, str]:
        return {f"p{i}": value for i, value in enumerate(self.params, start=1)}


def build_prefix_filter(prefixes: Sequence[str], *, column: str = "first_name") -> PrefixPredicate:
    """
    Build `col LIKE :p1 OR col LIKE :p2 ...` with each value bound as `<prefix>%`.

    `%` and `_` inside a prefix are not escaped: they keep their LIKE meaning.
    An empty list is refused so no caller can end up with an unconditioned query.
    """
    if not prefixes:
        raise ValidationError("build_prefix_filter", "at least one prefix is required")
    clauses = [f"{column} LIKE :p{i}" for i in range(1, len(prefixes) + 1)]
    return PrefixPredicate(
        sql=" OR ".join(clauses),
        params=tuple(f"{p}%" for p in prefixes),
    )
