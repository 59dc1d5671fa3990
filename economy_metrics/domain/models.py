"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

SENT = "sent"
RECEIVED = "received"


@dataclass(frozen=True)
class Account:
    """Economy account, captured with the group it belonged to at transfer time"""

    account_id: int
    group_id: int


@dataclass(frozen=True)
class Transaction:
    """Transfer of funds between two accounts"""

    transaction_id: int
    amount: Decimal
    sender: Account
    recipient: Account
    timestamp: datetime

    @property
    def date(self) -> date:
        return self.timestamp.date()

    def __str__(self) -> str:
        return (
            f"{self.transaction_id} | {self.amount} | "
            f"{self.sender.account_id} -> {self.recipient.account_id}"
        )


@dataclass
class DailyGroupTransfer:
    """Accumulated transfers from one group to another on a single day"""

    origin_group_id: int
    destination_group_id: int
    date: date
    sum_transfers: Decimal
    num_transfers: int


@dataclass
class GroupDailyBalance:
    """Net position of a group as of a date"""

    group_id: int
    date: date
    amount: Decimal


@dataclass
class RecentActivityEntry:
    """Single entry in an account's recent-activity window"""

    account_id: int
    transaction_id: int
    counterparty_id: int
    amount: Decimal
    direction: str  # "sent" or "received"
    timestamp: datetime
