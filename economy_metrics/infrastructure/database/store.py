"""Thin data store adapter over a SQLAlchemy session"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session

from economy_metrics.domain.exceptions import (
    ConstraintViolationError,
    QueryFailureError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Map SQLAlchemy errors onto the aggregation error taxonomy"""
    try:
        yield
    except IntegrityError as e:
        raise ConstraintViolationError(str(e.orig)) from e
    except (OperationalError, InterfaceError, DisconnectionError) as e:
        raise StoreUnavailableError(str(e)) from e
    except SQLAlchemyError as e:
        raise QueryFailureError(str(e)) from e


class DataStore:
    """
    Executes parameterized statements and demarcates transactions.

    A transaction begins implicitly with the first statement (session
    autobegin) and ends with commit() or rollback().
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    def execute_update(self, statement, params: Optional[Mapping[str, Any]] = None) -> int:
        """Run a mutation and return the number of rows affected"""
        with translate_errors():
            result = self.session.execute(statement, params)
        return result.rowcount or 0

    def execute_query(self, statement, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Run a read and return rows as column name -> value mappings"""
        with translate_errors():
            result = self.session.execute(statement, params)
            return [dict(row._mapping) for row in result]

    def commit(self) -> None:
        with translate_errors():
            self.session.commit()

    def rollback(self) -> None:
        with translate_errors():
            self.session.rollback()

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        """Nested transaction; released on success, rolled back on error"""
        with translate_errors():
            nested = self.session.begin_nested()
        try:
            yield
        except Exception:
            with translate_errors():
                nested.rollback()
            raise
        with translate_errors():
            nested.commit()

    def ping(self) -> None:
        """Verify the store is reachable; any failure means it is unavailable"""
        try:
            self.session.execute(select(1))
        except SQLAlchemyError as e:
            logger.error("Data store unreachable", extra={"error": str(e)})
            raise StoreUnavailableError(str(e)) from e
