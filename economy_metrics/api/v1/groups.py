"""GET endpoints for group-level aggregates"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query

from economy_metrics.api.v1.schemas import GroupBalanceResponse, GroupTransferResponse
from economy_metrics.api.dependencies import get_store
from economy_metrics.infrastructure.database.repositories import GroupBalanceRepository, GroupTransferRepository
from economy_metrics.infrastructure.database.store import DataStore

router = APIRouter()


@router.get("/transfers", response_model=GroupTransferResponse)
def get_group_transfer(
    origin_group_id: int = Query(..., description="Sending group"),
    destination_group_id: int = Query(..., description="Receiving group"),
    day: date = Query(..., alias="date", description="Day of the transfers"),
    store: DataStore = Depends(get_store),
):
    """Directed transfer total from one group to another on a day"""
    transfer = GroupTransferRepository(store).get(origin_group_id, destination_group_id, day)

    if not transfer:
        raise HTTPException(status_code=404, detail="No transfers for this group pair and date")

    return GroupTransferResponse(
        origin_group_id=transfer.origin_group_id,
        destination_group_id=transfer.destination_group_id,
        date=transfer.date,
        sum_transfers=transfer.sum_transfers,
        num_transfers=transfer.num_transfers,
    )


@router.get("/groups/{group_id}/balance", response_model=GroupBalanceResponse)
def get_group_balance(
    group_id: int,
    day: date = Query(..., alias="date", description="Day to report the balance for"),
    store: DataStore = Depends(get_store),
):
    """
    Balance of a group as of a day.

    Days without activity carry the most recent earlier balance forward;
    `as_of` is the day that balance was recorded.
    """
    balance = GroupBalanceRepository(store).get_as_of(group_id, day)

    if not balance:
        raise HTTPException(status_code=404, detail="Group has no balance on or before this date")

    return GroupBalanceResponse(group_id=group_id, date=day, as_of=balance.date, amount=balance.amount)
