"""Unit tests for data store error translation"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from economy_metrics.domain.exceptions import (
    AggregationError,
    ConstraintViolationError,
    QueryFailureError,
    StoreUnavailableError,
)
from economy_metrics.infrastructure.database.store import DataStore, translate_errors


@pytest.mark.parametrize(
    "raised, expected",
    [
        (IntegrityError("INSERT", {}, Exception("duplicate key")), ConstraintViolationError),
        (OperationalError("SELECT 1", {}, Exception("connection refused")), StoreUnavailableError),
        (ProgrammingError("SELEC", {}, Exception("syntax error")), QueryFailureError),
    ],
)
def test_sqlalchemy_errors_mapped_to_taxonomy(raised, expected):
    with pytest.raises(expected) as exc_info:
        with translate_errors():
            raise raised

    assert isinstance(exc_info.value, AggregationError)
    assert exc_info.value.__cause__ is raised


def test_non_database_errors_pass_through():
    with pytest.raises(KeyError):
        with translate_errors():
            raise KeyError("missing")


def test_execute_query_returns_column_mappings(store: DataStore):
    rows = store.execute_query(text("SELECT 1 AS one, 'x' AS letter"))
    assert rows == [{"one": 1, "letter": "x"}]


def test_execute_update_reports_rows_affected(store: DataStore):
    store.execute_update(
        text("INSERT INTO total_by_group (account_group_id, date, amount) VALUES (:g, :d, :a)"),
        {"g": 1, "d": "2026-10-18", "a": 10},
    )
    affected = store.execute_update(
        text("UPDATE total_by_group SET amount = amount + :delta WHERE account_group_id = :g"),
        {"delta": 5, "g": 1},
    )
    missed = store.execute_update(
        text("UPDATE total_by_group SET amount = amount + :delta WHERE account_group_id = :g"),
        {"delta": 5, "g": 99},
    )

    assert affected == 1
    assert missed == 0


def test_duplicate_key_raises_constraint_violation(store: DataStore):
    insert = text("INSERT INTO total_by_group (account_group_id, date, amount) VALUES (1, '2026-10-18', 0)")
    store.execute_update(insert)

    with pytest.raises(ConstraintViolationError):
        store.execute_update(insert)


def test_savepoint_rolls_back_only_nested_work(store: DataStore):
    store.execute_update(text("INSERT INTO total_by_group (account_group_id, date, amount) VALUES (1, '2026-10-18', 0)"))

    with pytest.raises(ConstraintViolationError):
        with store.savepoint():
            store.execute_update(
                text("INSERT INTO total_by_group (account_group_id, date, amount) VALUES (2, '2026-10-18', 0)")
            )
            store.execute_update(
                text("INSERT INTO total_by_group (account_group_id, date, amount) VALUES (1, '2026-10-18', 0)")
            )
    store.commit()

    rows = store.execute_query(text("SELECT account_group_id FROM total_by_group ORDER BY account_group_id"))
    assert rows == [{"account_group_id": 1}]


def test_ping_succeeds_on_reachable_store(store: DataStore):
    store.ping()
