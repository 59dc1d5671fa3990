"""Aggregation engine - incremental economy metrics for each transfer"""

import logging
import time
from datetime import date
from decimal import Decimal

from economy_metrics.config import settings
from economy_metrics.domain.exceptions import AggregationError, ConstraintViolationError, QueryFailureError
from economy_metrics.domain.models import Account, Transaction
from economy_metrics.infrastructure.database.repositories import (
    GroupBalanceRepository,
    GroupTransferRepository,
    RecentActivityRepository,
)
from economy_metrics.infrastructure.database.store import DataStore
from economy_metrics.infrastructure.observability.logging import log_transaction_processed
from economy_metrics.infrastructure.observability.metrics import (
    balance_seed_conflict_counter,
    balance_seed_counter,
    recent_activity_eviction_counter,
    record_transaction,
)

logger = logging.getLogger(__name__)


class AggregationEngine:
    """
    Applies one transaction at a time to the derived metrics.

    The engine keeps no state between transactions: the store is the
    source of truth for every aggregate, including the recent-activity
    windows.
    """

    def __init__(
        self,
        store: DataStore,
        transfers: GroupTransferRepository | None = None,
        balances: GroupBalanceRepository | None = None,
        activity: RecentActivityRepository | None = None,
    ):
        self.store = store
        self.transfers = transfers or GroupTransferRepository(store)
        self.balances = balances or GroupBalanceRepository(store)
        self.activity = activity or RecentActivityRepository(store, window_size=settings.recent_window_size)

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Update every aggregate for a transaction in a single store transaction.

        Flow:
        1. Accumulate the directed group-to-group daily total
        2. Apply -amount to the sender group's daily balance, +amount to the recipient's
        3. Append to the sender's and the recipient's recent-activity windows
        4. Commit

        Any failure rolls back all of the above and is re-raised; the caller
        decides whether to present the transaction again.

        Raises:
            StoreUnavailableError: The store cannot be reached
            ConstraintViolationError: A write collided with a unique key
            QueryFailureError: A statement failed or returned no value
        """
        start_time = time.perf_counter()

        try:
            self._accumulate_group_transfer(transaction)
            self._accumulate_group_balances(transaction)
            self._record_recent_activity(transaction, transaction.sender, transaction.recipient, is_sender=True)
            self._record_recent_activity(transaction, transaction.recipient, transaction.sender, is_sender=False)
            self.store.commit()

        except Exception as e:
            self._rollback(transaction, e)
            duration = time.perf_counter() - start_time
            record_transaction(False, duration, error=type(e).__name__)
            log_transaction_processed(
                transaction.transaction_id,
                transaction.sender.group_id,
                transaction.recipient.group_id,
                "rolled_back",
                duration * 1000,
            )
            raise

        duration = time.perf_counter() - start_time
        record_transaction(True, duration)
        log_transaction_processed(
            transaction.transaction_id,
            transaction.sender.group_id,
            transaction.recipient.group_id,
            "committed",
            duration * 1000,
        )

    def _accumulate_group_transfer(self, transaction: Transaction) -> None:
        # (sender, recipient) and (recipient, sender) are separate rows
        self.transfers.accumulate(
            transaction.sender.group_id,
            transaction.recipient.group_id,
            transaction.date,
            transaction.amount,
        )

    def _accumulate_group_balances(self, transaction: Transaction) -> None:
        self._apply_balance_delta(transaction.sender.group_id, transaction.date, -transaction.amount)
        self._apply_balance_delta(transaction.recipient.group_id, transaction.date, transaction.amount)

    def _apply_balance_delta(self, group_id: int, day: date, delta: Decimal) -> None:
        """
        Add `delta` to the group's balance for `day`.

        Requirements:
        - Existing row: in-place additive update
        - No row yet: seed from the net of transfers dated before `day`, insert seed + delta
        - Seeded insert collides with a concurrent writer: retry once as a plain update
        - `delta` is applied exactly once on every path
        """
        if self.balances.add_delta(group_id, day, delta):
            return

        initial_amount = self.transfers.net_before(group_id, day)
        try:
            with self.store.savepoint():
                self.balances.insert(group_id, day, initial_amount + delta)
        except ConstraintViolationError:
            balance_seed_conflict_counter.inc()
            logger.info(
                "Seeded balance row already exists, retrying as update",
                extra={"group_id": group_id, "date": day.isoformat()},
            )
            if not self.balances.add_delta(group_id, day, delta):
                raise QueryFailureError(
                    f"Balance row for group {group_id} on {day} vanished after a seed conflict"
                )
            return

        balance_seed_counter.inc()
        logger.debug(
            "Seeded daily group balance",
            extra={"group_id": group_id, "date": day.isoformat(), "initial_amount": str(initial_amount)},
        )

    def _record_recent_activity(
        self,
        transaction: Transaction,
        account: Account,
        counterparty: Account,
        is_sender: bool,
    ) -> None:
        self.activity.append(account.account_id, transaction, counterparty.account_id, is_sender)
        evicted = self.activity.evict_overflow(account.account_id)
        if evicted:
            recent_activity_eviction_counter.inc(evicted)
            logger.debug(
                "Evicted recent activity entries",
                extra={"account_id": account.account_id, "evicted": evicted},
            )

    def _rollback(self, transaction: Transaction, error: Exception) -> None:
        logger.warning(
            f"Rolling back transaction {transaction.transaction_id}: {error}",
            extra={"transaction_id": transaction.transaction_id, "error": type(error).__name__},
        )
        try:
            self.store.rollback()
        except AggregationError as rollback_error:
            logger.error(
                f"Rollback failed for transaction {transaction.transaction_id}: {rollback_error}",
                extra={"transaction_id": transaction.transaction_id},
            )
