"""Audit sink that writes one structured log record per event."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from smarttask_identity.domain.shared.time import Clock, utc_now

DEFAULT_AUDIT_LOGGER = "smarttask_identity.audit"


class LoggingAuditSink:
    """AuditSink backed by a dedicated stdlib logger.

    The full record is attached as ``extra={"audit": {...}}`` so a JSON
    formatter or log shipper can pick it up; the message itself stays short.
    """

    def __init__(
        self,
        logger_name: str = DEFAULT_AUDIT_LOGGER,
        clock: Clock = utc_now,
    ) -> None:
        self._logger = logging.getLogger(logger_name)
        self._clock = clock

    def record(
        self,
        event: str,
        actor_id: UUID | None,
        meta: Mapping[str, Any] | None = None,
    ) -> None:
        entry = {
            "event": event,
            "actor_id": str(actor_id) if actor_id is not None else None,
            "timestamp": self._clock().isoformat(),
            **{key: _jsonable(value) for key, value in (meta or {}).items()},
        }
        self._logger.info(
            "Security event %s (actor=%s)",
            event,
            entry["actor_id"],
            extra={"audit": entry},
        )


def _jsonable(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value
