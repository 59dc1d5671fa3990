"""Data access layer for the derived economy metrics"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from economy_metrics.domain.exceptions import QueryFailureError
from economy_metrics.domain.models import (
    RECEIVED,
    SENT,
    DailyGroupTransfer,
    GroupDailyBalance,
    RecentActivityEntry,
    Transaction,
)
from economy_metrics.infrastructure.database import models
from economy_metrics.infrastructure.database.store import DataStore

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class GroupTransferRepository:
    """Repository for directed daily group-to-group transfer totals"""

    def __init__(self, store: DataStore):
        self.store = store

    def accumulate(self, origin_group_id: int, destination_group_id: int, day: date, amount: Decimal) -> int:
        """Insert the (origin, destination, day) row or add to it, in one statement"""
        insert = _UPSERT_INSERTS.get(self.store.dialect_name)
        if insert is None:
            raise QueryFailureError(f"No atomic upsert available for dialect '{self.store.dialect_name}'")

        stmt = insert(models.DailyGroupTransfer).values(
            origin_group_id=origin_group_id,
            destination_group_id=destination_group_id,
            date=day,
            sum_transfers=amount,
            num_transfers=1,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["origin_group_id", "destination_group_id", "date"],
            set_={
                "sum_transfers": models.DailyGroupTransfer.sum_transfers + stmt.excluded.sum_transfers,
                "num_transfers": models.DailyGroupTransfer.num_transfers + 1,
            },
        )
        return self.store.execute_update(stmt)

    def net_before(self, group_id: int, day: date) -> Decimal:
        """Amount received minus amount sent by a group on all dates before `day`"""
        transfer = models.DailyGroupTransfer
        incoming = (
            select(func.coalesce(func.sum(transfer.sum_transfers), 0))
            .where(transfer.destination_group_id == group_id, transfer.date < day)
            .scalar_subquery()
        )
        outgoing = (
            select(func.coalesce(func.sum(transfer.sum_transfers), 0))
            .where(transfer.origin_group_id == group_id, transfer.date < day)
            .scalar_subquery()
        )
        rows = self.store.execute_query(select((incoming - outgoing).label("difference")))
        if not rows:
            raise QueryFailureError(f"Net transfer query returned no row for group {group_id}")
        return _as_decimal(rows[0]["difference"])

    def get(self, origin_group_id: int, destination_group_id: int, day: date) -> Optional[DailyGroupTransfer]:
        """Fetch the directed total for one day"""
        transfer = models.DailyGroupTransfer
        rows = self.store.execute_query(
            select(transfer.sum_transfers, transfer.num_transfers).where(
                transfer.origin_group_id == origin_group_id,
                transfer.destination_group_id == destination_group_id,
                transfer.date == day,
            )
        )
        if not rows:
            return None
        return DailyGroupTransfer(
            origin_group_id=origin_group_id,
            destination_group_id=destination_group_id,
            date=day,
            sum_transfers=_as_decimal(rows[0]["sum_transfers"]),
            num_transfers=rows[0]["num_transfers"],
        )


class GroupBalanceRepository:
    """Repository for per-group daily balances"""

    def __init__(self, store: DataStore):
        self.store = store

    def add_delta(self, group_id: int, day: date, delta: Decimal) -> int:
        """Add `delta` to the existing (group, day) row; returns rows affected"""
        stmt = (
            update(models.TotalByGroup)
            .where(
                models.TotalByGroup.account_group_id == group_id,
                models.TotalByGroup.date == day,
            )
            .values(amount=models.TotalByGroup.amount + delta)
            .execution_options(synchronize_session=False)
        )
        return self.store.execute_update(stmt)

    def insert(self, group_id: int, day: date, amount: Decimal) -> None:
        """Create the (group, day) row; collides with the unique key if it exists"""
        stmt = models.TotalByGroup.__table__.insert().values(
            account_group_id=group_id,
            date=day,
            amount=amount,
        )
        self.store.execute_update(stmt)

    def get(self, group_id: int, day: date) -> Optional[GroupDailyBalance]:
        """Fetch the row stored for exactly this day"""
        balance = models.TotalByGroup
        rows = self.store.execute_query(
            select(balance.date, balance.amount).where(
                balance.account_group_id == group_id,
                balance.date == day,
            )
        )
        if not rows:
            return None
        return GroupDailyBalance(group_id=group_id, date=rows[0]["date"], amount=_as_decimal(rows[0]["amount"]))

    def get_as_of(self, group_id: int, day: date) -> Optional[GroupDailyBalance]:
        """Latest balance dated on or before `day` (days without activity carry forward)"""
        balance = models.TotalByGroup
        rows = self.store.execute_query(
            select(balance.date, balance.amount)
            .where(balance.account_group_id == group_id, balance.date <= day)
            .order_by(balance.date.desc())
            .limit(1)
        )
        if not rows:
            return None
        return GroupDailyBalance(group_id=group_id, date=rows[0]["date"], amount=_as_decimal(rows[0]["amount"]))


class RecentActivityRepository:
    """Repository for the bounded per-account recent-activity window"""

    def __init__(self, store: DataStore, window_size: int = 20):
        self.store = store
        self.window_size = window_size

    def append(self, account_id: int, transaction: Transaction, counterparty_id: int, is_sender: bool) -> None:
        stmt = models.RecentTransaction.__table__.insert().values(
            account=account_id,
            timestamp=transaction.timestamp,
            transaction_id=transaction.transaction_id,
            other_account=counterparty_id,
            amount=transaction.amount,
            is_sender=is_sender,
        )
        self.store.execute_update(stmt)

    def evict_overflow(self, account_id: int) -> int:
        """Delete everything older than the newest `window_size` entries; returns rows evicted"""
        recent = models.RecentTransaction
        overflow = (
            select(recent.id)
            .where(recent.account == account_id)
            .order_by(recent.timestamp.desc(), recent.id.desc())
            .offset(self.window_size)
        )
        stmt = (
            delete(recent)
            .where(recent.account == account_id, recent.id.in_(overflow))
            .execution_options(synchronize_session=False)
        )
        return self.store.execute_update(stmt)

    def list_for_account(self, account_id: int) -> List[RecentActivityEntry]:
        """Window contents, newest first"""
        recent = models.RecentTransaction
        rows = self.store.execute_query(
            select(
                recent.transaction_id,
                recent.other_account,
                recent.amount,
                recent.is_sender,
                recent.timestamp,
            )
            .where(recent.account == account_id)
            .order_by(recent.timestamp.desc(), recent.id.desc())
        )
        return [
            RecentActivityEntry(
                account_id=account_id,
                transaction_id=row["transaction_id"],
                counterparty_id=row["other_account"],
                amount=_as_decimal(row["amount"]),
                direction=SENT if row["is_sender"] else RECEIVED,
                timestamp=row["timestamp"],
            )
            for row in rows
        ]
