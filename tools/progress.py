from __future__ import annotations

"""Progress notifications sent to the client during a tool call.

A tool reports a handful of fixed checkpoints (25 -> 75 -> 100).
Delivery is best-effort: a failing sink never breaks the invocation.

Event example:
    {"type": "progress", "data": {"message": "Converting...", "progress": 75}}
"""

import logging
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, Field

# Sink signature supplied by the hosting framework (publishToClient).
ProgressSink = Callable[[dict[str, Any]], None]


class ProgressData(BaseModel):
    message: str
    progress: int = Field(ge=0, le=100)


class ProgressEvent(BaseModel):
    type: Literal["progress"] = "progress"
    data: ProgressData


def _discard(event: dict[str, Any]) -> None:
    return None


class ProgressReporter:
    """Wrap an optional sink so tool code can report unconditionally."""

    def __init__(self, sink: ProgressSink | None = None, tool_name: str = "tool") -> None:
        self._sink = sink or _discard
        self._tool_name = tool_name
        self._last = 0
        self._logger = logging.getLogger("tools.progress")

    @property
    def last_checkpoint(self) -> int:
        return self._last

    def report(self, progress: int, message: str) -> None:
        """Publish one checkpoint.

        Checkpoints must not go backwards within one invocation;
        a lower value is dropped with a warning.
        """
        if progress < self._last:
            self._logger.warning(
                "Dropping out-of-order progress for %s: %s < %s",
                self._tool_name,
                progress,
                self._last,
            )
            return

        event = ProgressEvent(data=ProgressData(message=message, progress=progress))
        self._last = progress
        try:
            self._sink(event.model_dump())
        except Exception:
            # Progress is a side channel; the tool result matters more.
            self._logger.warning("Progress sink failed for %s at %s%%", self._tool_name, progress, exc_info=True)
