"""
Monitoring Module.

Failure visibility for generation runs:
- Last-known error per unit and task type
- Operator alerts on terminal generation and bounding failures

Usage:
    from monitoring import ErrorTracker, LoggingAlertNotifier

    tracker = ErrorTracker()
    tracker.store(42, "quiz", "Quiz generation failed after 3 attempts")
"""

from .alerts import AlertNotifier, LoggingAlertNotifier
from .error_tracker import ErrorSink, ErrorTracker

__all__ = [
    "AlertNotifier",
    "LoggingAlertNotifier",
    "ErrorSink",
    "ErrorTracker",
]
