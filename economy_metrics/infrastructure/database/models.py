"""SQLAlchemy ORM models for the derived economy metrics"""

from sqlalchemy import Column, BigInteger, Boolean, Date, DateTime, Integer, Numeric, Index, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Fixed precision for every monetary column
MONEY = Numeric(18, 2)


class DailyGroupTransfer(Base):
    """Directed daily transfer totals between two account groups"""

    __tablename__ = "daily_group_transfer"
    __table_args__ = (
        UniqueConstraint("origin_group_id", "destination_group_id", "date", name="uq_daily_group_transfer_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    origin_group_id = Column(BigInteger, nullable=False, index=True)
    destination_group_id = Column(BigInteger, nullable=False, index=True)
    date = Column(Date, nullable=False)
    sum_transfers = Column(MONEY, nullable=False, default=0)
    num_transfers = Column(Integer, nullable=False, default=0)


class TotalByGroup(Base):
    """Net balance of an account group as of a day"""

    __tablename__ = "total_by_group"
    __table_args__ = (
        UniqueConstraint("account_group_id", "date", name="uq_total_by_group_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_group_id = Column(BigInteger, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(MONEY, nullable=False)


class RecentTransaction(Base):
    """One entry of an account's bounded recent-activity window"""

    __tablename__ = "recent_transactions"
    __table_args__ = (
        Index("ix_recent_transactions_account_timestamp", "account", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account = Column(BigInteger, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    transaction_id = Column(BigInteger, nullable=False)
    other_account = Column(BigInteger, nullable=False)
    amount = Column(MONEY, nullable=False)
    is_sender = Column(Boolean, nullable=False)
