"""GET /v1/accounts/{account_id}/recent - Recent activity window for an account"""

from fastapi import APIRouter, Depends

from economy_metrics.api.v1.schemas import RecentActivityItem, RecentActivityResponse
from economy_metrics.api.dependencies import get_store
from economy_metrics.config import settings
from economy_metrics.infrastructure.database.repositories import RecentActivityRepository
from economy_metrics.infrastructure.database.store import DataStore

router = APIRouter()


@router.get("/accounts/{account_id}/recent", response_model=RecentActivityResponse)
def get_recent_activity(account_id: int, store: DataStore = Depends(get_store)):
    """Most recent transactions touching an account, newest first"""
    repo = RecentActivityRepository(store, window_size=settings.recent_window_size)

    entries = [
        RecentActivityItem(
            transaction_id=entry.transaction_id,
            counterparty_id=entry.counterparty_id,
            amount=entry.amount,
            direction=entry.direction,
            timestamp=entry.timestamp,
        )
        for entry in repo.list_for_account(account_id)
    ]

    return RecentActivityResponse(account_id=account_id, entries=entries)
