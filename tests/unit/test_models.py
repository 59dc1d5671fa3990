"""Unit tests for domain models"""

import dataclasses
import pytest
from datetime import date, datetime
from decimal import Decimal
from economy_metrics.domain.models import Account, Transaction


def _transaction() -> Transaction:
    return Transaction(
        transaction_id=7,
        amount=Decimal("12.50"),
        sender=Account(account_id=1000000000000001, group_id=1),
        recipient=Account(account_id=2000000000000001, group_id=2),
        timestamp=datetime(2026, 10, 18, 23, 59, 59),
    )


def test_transaction_date_truncates_timestamp():
    assert _transaction().date == date(2026, 10, 18)


def test_transaction_string_format():
    assert str(_transaction()) == "7 | 12.50 | 1000000000000001 -> 2000000000000001"


def test_transaction_is_immutable():
    transaction = _transaction()
    with pytest.raises(dataclasses.FrozenInstanceError):
        transaction.amount = Decimal("99")
