"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from economy_metrics.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_transaction_processed(
    transaction_id: int,
    sender_group_id: int,
    recipient_group_id: int,
    outcome: str,
    duration_ms: float,
) -> None:
    """Log structured processing outcome for a single transaction"""
    logging.getLogger("economy_metrics.aggregation").info(
        "Transaction processed" if outcome == "committed" else "Transaction rolled back",
        extra={
            "transaction_id": transaction_id,
            "sender_group_id": sender_group_id,
            "recipient_group_id": recipient_group_id,
            "step": "aggregation_complete",
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )
