"""
Failure alerts for operators.

The pipeline only talks to the AlertNotifier protocol; delivery (email,
chat, paging) belongs to the host application. LoggingAlertNotifier is
the default and writes alerts to the "alerts" logger.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from shared.config import settings


class AlertNotifier(Protocol):
    def notify_generation_failure(self, task_type: str, error: str, unit_id: Optional[int] = None) -> None:
        ...

    def notify_bounding_failure(self, task_type: str, error: str, unit_id: Optional[int] = None) -> None:
        ...


class LoggingAlertNotifier:
    """
    Alert notifier that writes structured alert records to a logger.

    Usage:
        notifier = LoggingAlertNotifier()
        notifier.notify_generation_failure("quiz", "timeout", unit_id=42)
    """

    def __init__(self, enabled: bool = None, logger_name: str = "alerts"):
        self.enabled = settings.NOTIFICATIONS_ENABLED if enabled is None else enabled
        self.logger = logging.getLogger(logger_name)

    def notify_generation_failure(self, task_type: str, error: str, unit_id: Optional[int] = None) -> None:
        """Alert on a terminal generation failure."""
        self._send("AI Generation Failed", "generation", task_type, error, unit_id)

    def notify_bounding_failure(self, task_type: str, error: str, unit_id: Optional[int] = None) -> None:
        """Alert on a context bounding failure that fell back to truncation."""
        self._send("Context Bounding Failed", "bounding", task_type, error, unit_id)

    def _send(self, subject: str, error_type: str, task_type: str, error: str, unit_id: Optional[int]) -> None:
        if not self.enabled:
            self.logger.debug(f"Notifications disabled, skipping alert: {subject}")
            return

        record: Dict = {
            "subject": subject,
            "error_type": error_type,
            "task_type": task_type,
            "unit_id": unit_id,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self.logger.warning(json.dumps(record))
