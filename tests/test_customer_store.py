"""Tests for CustomerStore against a SQLite database."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.crm import create_app
from app.crm.db import session_scope
from app.crm.models import Base
from app.crm.modules.customers.errors import QueryError, TransactionError, ValidationError
from app.crm.modules.customers.models import Customer, CustomerInfo, DeleteInfo
from app.crm.modules.customers.store import CustomerStore


def _seed_customers(s):
    for i in range(1, 5):
        s.add(
            Customer(
                id=i,
                first_name=f"Клиент{i}",
                last_name=f"Клиентов{i}",
                patronymic_name=f"Клиентович{i}",
                phone="77777777777",
                email=f"test{i}@test.ru",
            )
        )
    s.add(
        Customer(
            id=5,
            first_name="ДругойКлиент5",
            last_name="Клиентов5",
            patronymic_name="Клиентович5",
            phone="77777777777",
            email="test5@test.ru",
        )
    )


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.delenv("DB_CONNECTION_URL", raising=False)
    monkeypatch.setenv("ENV", "test")

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        _seed_customers(s)

    yield app
    engine.dispose()


@pytest.fixture()
def store(app):
    return CustomerStore(app.extensions["sqlalchemy_sessionmaker"])


def _all_ids(app):
    with session_scope(app) as s:
        return [row[0] for row in s.execute(text("SELECT id FROM customer ORDER BY id"))]


def test_search_single_prefix(store):
    customers = store.search(["Клиент"])
    assert [c.id for c in customers] == [1, 2, 3, 4]
    assert [c.first_name for c in customers] == ["Клиент1", "Клиент2", "Клиент3", "Клиент4"]


def test_search_multiple_prefixes_sorted_by_id(store):
    customers = store.search(["Другой", "Клиент"])
    assert [c.id for c in customers] == [1, 2, 3, 4, 5]


def test_search_returns_only_matching_rows(store):
    for c in store.search(["Клиент1", "Другой"]):
        assert c.first_name.startswith(("Клиент1", "Другой"))


def test_search_no_matches(store):
    assert store.search(["NonExistent"]) == []


def test_search_decodes_full_row(store):
    (c,) = store.search(["ДругойКлиент5"])
    assert c == CustomerInfo(
        id=5,
        first_name="ДругойКлиент5",
        last_name="Клиентов5",
        patronymic_name="Клиентович5",
        phone="77777777777",
        email="test5@test.ru",
    )


def test_search_keeps_null_distinct_from_empty(app, store):
    with session_scope(app) as s:
        s.add(Customer(id=10, first_name="Пустой", last_name=None, patronymic_name=None, phone="", email=None))

    (c,) = store.search(["Пустой"])
    assert c.last_name is None
    assert c.patronymic_name is None
    assert c.email is None
    assert c.phone == ""


def test_search_wildcards_are_not_escaped(store):
    # "_" matches any single character, so this still finds Клиент1..4
    assert [c.id for c in store.search(["Клиен_"])] == [1, 2, 3, 4]


def test_search_empty_filter_rejected(store):
    with pytest.raises(ValidationError):
        store.search([])


def test_search_backend_failure_raises_query_error(app, store):
    with session_scope(app) as s:
        s.execute(text("DROP TABLE customer"))

    with pytest.raises(QueryError) as excinfo:
        store.search(["Клиент"])
    assert excinfo.value.operation == "search"
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_row_decode_failure_raises_query_error():
    with pytest.raises(QueryError):
        CustomerStore._row_to_customer({"id": None, "first_name": "x", "last_name": None,
                                        "patronymic_name": None, "phone": None, "email": None})
    with pytest.raises(QueryError):
        CustomerStore._row_to_customer({"id": 1, "first_name": "x"})


def test_delete_single_prefix(app, store):
    result = store.delete(["Клиент"])

    assert result == DeleteInfo(count=4, ids=[1, 2, 3, 4])
    assert result.count == len(result.ids)
    assert store.search(["Клиент"]) == []
    assert _all_ids(app) == [5]


def test_delete_multiple_prefixes(app, store):
    result = store.delete(["Клиент", "Другой"])
    assert result == DeleteInfo(count=5, ids=[1, 2, 3, 4, 5])
    assert _all_ids(app) == []


def test_delete_no_matches_is_success(app, store):
    result = store.delete(["NonExistent"])
    assert result == DeleteInfo(count=0, ids=[])
    assert _all_ids(app) == [1, 2, 3, 4, 5]


def test_delete_twice_second_reports_zero(store):
    assert store.delete(["Клиент"]).count == 4
    assert store.delete(["Клиент"]) == DeleteInfo(count=0, ids=[])


def test_delete_reported_ids_match_removed_rows(app, store):
    before = set(_all_ids(app))
    result = store.delete(["Клиент2", "Клиент4"])
    after = set(_all_ids(app))
    assert set(result.ids) == before - after
    assert result.count == len(before) - len(after)


def test_delete_empty_filter_rejected(store):
    with pytest.raises(ValidationError):
        store.delete([])


def test_delete_rolls_back_when_commit_fails(app, store, monkeypatch):
    def _failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("forced commit failure"))

    monkeypatch.setattr(Session, "commit", _failing_commit)

    with pytest.raises(TransactionError) as excinfo:
        store.delete(["Клиент"])
    assert excinfo.value.operation == "delete"

    monkeypatch.undo()
    assert _all_ids(app) == [1, 2, 3, 4, 5]


def test_delete_rolls_back_on_row_count_mismatch(app, store, monkeypatch):
    # Phase 1 reports fewer ids than phase 2 removes: the result would be wrong,
    # so the whole delete must be undone.
    monkeypatch.setattr(CustomerStore, "_select_ids", staticmethod(lambda s, predicate: [1]))

    with pytest.raises(TransactionError):
        store.delete(["Клиент"])

    assert _all_ids(app) == [1, 2, 3, 4, 5]


def test_delete_rolls_back_when_delete_statement_fails(app, store, monkeypatch):
    def _failing_delete(s, predicate):
        raise OperationalError("DELETE FROM customer", {}, Exception("forced delete failure"))

    monkeypatch.setattr(CustomerStore, "_delete_matching", staticmethod(_failing_delete))

    with pytest.raises(TransactionError) as excinfo:
        store.delete(["Клиент"])
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert _all_ids(app) == [1, 2, 3, 4, 5]


class _Cancelled(BaseException):
    pass


def test_delete_rolls_back_when_interrupted(app, store, monkeypatch):
    original = CustomerStore._delete_matching

    def _delete_then_cancel(s, predicate):
        original(s, predicate)
        raise _Cancelled()

    monkeypatch.setattr(CustomerStore, "_delete_matching", staticmethod(_delete_then_cancel))

    with pytest.raises(_Cancelled):
        store.delete(["Клиент"])
    assert _all_ids(app) == [1, 2, 3, 4, 5]


def test_delete_backend_failure_raises_transaction_error(app, store):
    with session_scope(app) as s:
        s.execute(text("DROP TABLE customer"))

    with pytest.raises(TransactionError):
        store.delete(["Клиент"])
