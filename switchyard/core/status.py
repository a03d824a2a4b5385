"""Handler status board.

Components report what each handler is doing ("idle", "working", ...) to a
StatusBoard passed to them at construction time. Observers subscribe to
change events, e.g. to push them to a dashboard.
"""

import logging
from datetime import datetime
from typing import Any, Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

StatusListener = Callable[[str, dict[str, Any]], None]


class HandlerStatus(BaseModel):
    """Current status of one handler."""

    id: str
    status: str = "idle"
    last_activity: datetime | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class StatusBoard:
    """Shared "current status per handler" view.

    Unknown handler ids are registered on first use. Listener errors are
    logged and do not affect the caller reporting the status.
    """

    def __init__(self, handlers: list[str] | None = None):
        self._state: dict[str, HandlerStatus] = {}
        self._listeners: list[StatusListener] = []
        for handler_id in handlers or []:
            self._state[handler_id] = HandlerStatus(id=handler_id)

    def set_status(self, handler_id: str, status: str, **meta: Any) -> HandlerStatus:
        """Update a handler's status and notify listeners."""
        record = self._state.setdefault(handler_id, HandlerStatus(id=handler_id))
        record.status = status
        record.last_activity = datetime.utcnow()
        if meta:
            record.meta = {**record.meta, **meta}

        self._emit(handler_id, {
            "id": handler_id,
            "status": status,
            "last_activity": record.last_activity.isoformat(),
            **meta,
        })
        return record

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get(self, handler_id: str) -> HandlerStatus | None:
        return self._state.get(handler_id)

    def snapshot(self) -> list[HandlerStatus]:
        """All known handlers, sorted by id."""
        return [self._state[key] for key in sorted(self._state)]

    def _emit(self, handler_id: str, update: dict[str, Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(handler_id, update)
            except Exception as e:
                logger.warning(f"Status listener failed for {handler_id}: {e}")
