"""Build collector — records pipeline events into an EventLog.

Components receive a collector rather than the log itself so the event
construction (timestamps, field naming) lives in one place.

"""

from __future__ import annotations

from typing import Literal

from mews.observability.events import (
    ContentLoaded,
    FileCompiled,
    FileWritten,
    ScriptExecuted,
    TaskQueued,
    now_ns,
)
from mews.observability.log import EventLog


class BuildCollector:
    """Event collector for one build run.

    Args:
        log: The EventLog to store events in.  A fresh log is created when
            omitted.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_load(self, path: str, *, cached: bool, field_count: int) -> None:
        """Record a content store lookup."""
        self._log.append(
            ContentLoaded(
                path=path,
                cached=cached,
                field_count=field_count,
                timestamp_ns=now_ns(),
            )
        )

    def record_queued(
        self,
        path: str,
        base_dir: str,
        reason: Literal["entry", "include", "reference"],
    ) -> None:
        """Record a task being pushed onto the work queue."""
        self._log.append(
            TaskQueued(path=path, base_dir=base_dir, reason=reason, timestamp_ns=now_ns())
        )

    def record_compile(
        self,
        path: str,
        kind: str,
        *,
        dynamic: bool = False,
        cached: bool = False,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a finished compile (or a cache hit)."""
        self._log.append(
            FileCompiled(
                path=path,
                kind=kind,
                dynamic=dynamic,
                cached=cached,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_script(self, path: str, duration_ms: float) -> None:
        """Record one sandboxed script execution."""
        self._log.append(
            ScriptExecuted(path=path, duration_ms=duration_ms, timestamp_ns=now_ns())
        )

    def record_write(self, source: str, target: str, size_bytes: int) -> None:
        """Record an output file write."""
        self._log.append(
            FileWritten(
                source=source,
                target=target,
                size_bytes=size_bytes,
                timestamp_ns=now_ns(),
            )
        )
