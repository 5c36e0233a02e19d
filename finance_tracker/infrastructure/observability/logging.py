"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from finance_tracker.config import settings


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


def log_debt_created(
    request_id: str,
    member_id: str,
    debt_id: str,
    installments_count: int,
    frequency: str,
) -> None:
    """Log debt creation with its generated schedule size"""
    logging.info(
        "Debt created",
        extra={
            "request_id": request_id,
            "member_id": member_id,
            "debt_id": debt_id,
            "step": "debt_created",
            "installments_count": installments_count,
            "frequency": frequency,
        },
    )


def log_installment_status(
    request_id: str,
    installment_id: str,
    debt_id: str,
    status: str,
    previous_debt_status: str,
    debt_status: str,
) -> None:
    """Log an installment status change and whether its debt flipped"""
    logging.info(
        "Installment status updated",
        extra={
            "request_id": request_id,
            "installment_id": installment_id,
            "debt_id": debt_id,
            "step": "installment_status",
            "status": status,
            "debt_status": debt_status,
            "debt_status_changed": previous_debt_status != debt_status,
        },
    )


def log_recurrence_expanded(request_id: str, member_id: str, kind: str, occurrences: int) -> None:
    """Log how many occurrences a revenue/expense produced"""
    logging.info(
        "Transaction recorded",
        extra={
            "request_id": request_id,
            "member_id": member_id,
            "step": "transaction_created",
            "kind": kind,
            "occurrences": occurrences,
        },
    )
