import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Report failures that must not propagate to the caller.

    Used for exceptions raised by ``on_evict`` hooks, which run inside
    garbage-collector callbacks where raising is not an option.
    """

    def __init__(self, logger: logging.Logger, event_bus: Optional[EventBus] = None):
        self._logger = logger
        self._events = event_bus
        self._callback: Optional[Callable[[Exception, ErrorSeverity], None]] = None

    def register_callback(self, callback: Callable[[Exception, ErrorSeverity], None]):
        self._callback = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method(f"{error.__class__.__name__}: {error}", extra={"context": context or {}})

        if self._events is not None:
            self._events.publish(ErrorOccurredEvent(
                error=error,
                severity=severity,
                context=context or {}
            ))

        if self._callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            try:
                self._callback(error, severity)
            except Exception as exc:
                self._logger.error(f"Error callback failed: {exc}")
