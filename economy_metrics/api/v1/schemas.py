"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, model_validator


class AccountSchema(BaseModel):
    """Account as captured on a transaction"""

    account_id: int = Field(..., description="Account identifier")
    group_id: int = Field(..., description="Group the account belonged to at transfer time")


class TransactionRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    transaction_id: int = Field(..., description="Transaction identifier")
    amount: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2, description="Amount transferred")
    sender: AccountSchema
    recipient: AccountSchema
    timestamp: datetime

    @model_validator(mode="after")
    def check_distinct_accounts(self) -> "TransactionRequest":
        if self.sender.account_id == self.recipient.account_id:
            raise ValueError("sender and recipient must be different accounts")
        return self


class TransactionResponse(BaseModel):
    """Response for POST /v1/transactions"""

    transaction_id: int
    status: str = "processed"


class GroupTransferResponse(BaseModel):
    """Response for GET /v1/transfers"""

    origin_group_id: int
    destination_group_id: int
    date: date
    sum_transfers: Decimal
    num_transfers: int


class GroupBalanceResponse(BaseModel):
    """Response for GET /v1/groups/{group_id}/balance"""

    group_id: int
    date: date
    as_of: date
    amount: Decimal


class RecentActivityItem(BaseModel):
    """Single entry in an account's recent-activity window"""

    transaction_id: int
    counterparty_id: int
    amount: Decimal
    direction: str
    timestamp: datetime


class RecentActivityResponse(BaseModel):
    """Response for GET /v1/accounts/{account_id}/recent"""

    account_id: int
    entries: List[RecentActivityItem]
