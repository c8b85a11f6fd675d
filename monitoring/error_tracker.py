"""
Last-known generation error per (unit, task type).

In-memory implementation of the error sink. Hosts that persist errors
provide their own object with the same three methods.
"""

import logging
import threading
from typing import Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


def _task_key(task_type) -> str:
    return getattr(task_type, "value", task_type)


class ErrorSink(Protocol):
    def store(self, unit_id: int, task_type: str, message: str) -> None:
        ...

    def clear(self, unit_id: int, task_type: str) -> None:
        ...

    def get(self, unit_id: int, task_type: str) -> Optional[str]:
        ...


class ErrorTracker:
    """
    Remembers the most recent error for each unit/task so callers can show it.

    Invalid keys (unit_id <= 0 or empty task type) are ignored.
    """

    def __init__(self):
        self._errors: Dict[Tuple[int, str], str] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _valid(unit_id: int, task_type: str) -> bool:
        return unit_id > 0 and bool(task_type)

    def store(self, unit_id: int, task_type: str, message: str) -> None:
        if not self._valid(unit_id, task_type):
            return
        with self._lock:
            self._errors[(unit_id, _task_key(task_type))] = message.strip()
        logger.debug(f"Stored error for unit {unit_id} / {task_type}")

    def clear(self, unit_id: int, task_type: str) -> None:
        if not self._valid(unit_id, task_type):
            return
        with self._lock:
            self._errors.pop((unit_id, _task_key(task_type)), None)

    def get(self, unit_id: int, task_type: str) -> Optional[str]:
        if not self._valid(unit_id, task_type):
            return None
        with self._lock:
            return self._errors.get((unit_id, _task_key(task_type))) or None
