"""Diagnostic audit events emitted by the request object pipeline."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from .constants import OAUTH_INBOUND_SERVICE
from .models import DiagnosticEvent, Outcome

logger = logging.getLogger(__name__)


class DiagnosticsSink(Protocol):
    """Destination for diagnostic events."""

    def is_enabled(self) -> bool:
        """Return ``True`` when diagnostic events should be recorded."""

    def emit(self, event: DiagnosticEvent) -> None:
        """Publish ``event``."""


class LoggingDiagnosticsSink:
    """Write diagnostic events to a dedicated logger."""

    def __init__(self, enabled: bool = False, logger_name: str = "oidc_reqobj.audit") -> None:
        self.enabled = enabled
        self._logger = logging.getLogger(logger_name)

    def is_enabled(self) -> bool:
        return self.enabled

    def emit(self, event: DiagnosticEvent) -> None:
        level = logging.INFO if event.outcome is Outcome.SUCCESS else logging.WARNING
        self._logger.log(
            level,
            event.message,
            extra={"diagnostic_event": event.model_dump(mode="json")},
        )


class InMemoryDiagnosticsSink:
    """Collect events in a list. Used by tests and the CLI."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.events: List[DiagnosticEvent] = []

    def is_enabled(self) -> bool:
        return self.enabled

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)


class AuditTrail:
    """Per-call list of diagnostic events.

    Pipeline stages record events here instead of talking to the sink;
    :meth:`flush` hands them to the sink once the call has an outcome. The
    sink's enabled flag is consulted at every :meth:`record`.
    """

    def __init__(self, sink: DiagnosticsSink) -> None:
        self._sink = sink
        self.events: List[DiagnosticEvent] = []

    def _enabled(self) -> bool:
        try:
            return self._sink.is_enabled()
        except Exception:
            logger.warning("Diagnostics sink failed to report its state", exc_info=True)
            return False

    def record(
        self,
        outcome: Outcome,
        message: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        configurations: Optional[Dict[str, Any]] = None,
        component: str = OAUTH_INBOUND_SERVICE,
    ) -> None:
        if not self._enabled():
            return
        self.events.append(
            DiagnosticEvent(
                component=component,
                outcome=outcome,
                message=message,
                action=action,
                params=params,
                configurations=configurations,
            )
        )

    def failed(self, message: str, action: str, **kwargs: Any) -> None:
        self.record(Outcome.FAILED, message, action, **kwargs)

    def succeeded(self, message: str, action: str, **kwargs: Any) -> None:
        self.record(Outcome.SUCCESS, message, action, **kwargs)

    def flush(self) -> List[DiagnosticEvent]:
        """Emit recorded events and return them.

        A sink failure is logged and never propagates to the caller.
        """
        events, self.events = self.events, []
        for event in events:
            try:
                self._sink.emit(event)
            except Exception:
                logger.warning(
                    f"Failed to emit diagnostic event for action {event.action}",
                    exc_info=True,
                )
        return events
