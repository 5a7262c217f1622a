"""Structured JSON logging for batch runs and the API"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from loan_allocator.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_run_summary(
    run_id: str,
    loan_count: int,
    assigned_count: int,
    facility_count: int,
    duration_ms: float,
) -> None:
    """Log structured allocation run outcome for analysis"""
    logging.info(
        "Allocation run completed",
        extra={
            "run_id": run_id,
            "step": "allocation_complete",
            "loan_count": loan_count,
            "assigned_count": assigned_count,
            "unassigned_count": loan_count - assigned_count,
            "facility_count": facility_count,
            "duration_ms": duration_ms,
        },
    )
