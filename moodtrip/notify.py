"""
notify.py — Notification / analytics sinks.

Sinks are invoked at idea-created and moodboard-completed. They are
fire-and-forget: a failing sink is logged and never fails the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Protocol

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def on_new_idea(self, group_id: str, idea_id: str) -> None: ...

    def on_moodboard_completed(self, idea_id: str, payload: Dict[str, Any]) -> None: ...


class LoggingNotificationSink:
    """Development sink: logs a structured line per event."""

    def on_new_idea(self, group_id: str, idea_id: str) -> None:
        logger.info(
            "New idea notification: %s",
            {"timestamp": _now(), "type": "NEW_IDEA", "group_id": group_id, "idea_id": idea_id},
        )

    def on_moodboard_completed(self, idea_id: str, payload: Dict[str, Any]) -> None:
        logger.info(
            "Moodboard completed: %s",
            {"timestamp": _now(), "type": "MOODBOARD_COMPLETED", "idea_id": idea_id, **payload},
        )


def fire_and_forget(fn: Callable[..., Any], *args, **kwargs) -> bool:
    """Call a sink method, swallowing and logging any error. Returns success."""
    try:
        fn(*args, **kwargs)
        return True
    except Exception as e:
        logger.warning("Notification sink %s failed: %s", getattr(fn, "__name__", fn), e)
        return False


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
