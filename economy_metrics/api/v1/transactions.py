"""POST /v1/transactions - Ingest a transfer into the aggregates"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from economy_metrics.api.v1.schemas import TransactionRequest, TransactionResponse
from economy_metrics.api.dependencies import get_aggregation_engine, get_request_id
from economy_metrics.domain.aggregation import AggregationEngine
from economy_metrics.domain.exceptions import ConstraintViolationError, QueryFailureError, StoreUnavailableError
from economy_metrics.domain.models import Account, Transaction

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request_body: TransactionRequest,
    request: Request,
    engine: AggregationEngine = Depends(get_aggregation_engine),
):
    """
    Apply a transaction to the group transfer totals, group balances and
    recent-activity windows.

    A failed request leaves no partial aggregate state behind and may be
    retried with the same body.
    """
    request_id = get_request_id(request)
    transaction = Transaction(
        transaction_id=request_body.transaction_id,
        amount=request_body.amount,
        sender=Account(request_body.sender.account_id, request_body.sender.group_id),
        recipient=Account(request_body.recipient.account_id, request_body.recipient.group_id),
        timestamp=request_body.timestamp,
    )

    try:
        engine.process_transaction(transaction)

    except StoreUnavailableError as e:
        logging.error(f"Data store unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Data store unavailable")

    except ConstraintViolationError as e:
        logging.warning(f"Constraint violation: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Conflicting concurrent update, retry the transaction")

    except QueryFailureError as e:
        logging.error(f"Query failure: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Transaction could not be processed")

    return TransactionResponse(transaction_id=transaction.transaction_id)
