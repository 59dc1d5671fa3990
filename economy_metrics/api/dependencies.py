"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from economy_metrics.domain.aggregation import AggregationEngine
from economy_metrics.infrastructure.database.session import get_db
from economy_metrics.infrastructure.database.store import DataStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> DataStore:
    """Provide a data store bound to the request's session"""
    return DataStore(db)


def get_aggregation_engine(store: DataStore = Depends(get_store)) -> AggregationEngine:
    """Provide an aggregation engine bound to the request's store"""
    return AggregationEngine(store)
