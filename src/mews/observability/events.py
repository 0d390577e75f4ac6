"""Build event model.

Defines event types for the compile pipeline: content loads, queue
traffic, per-file compiles, sandboxed script runs and output writes.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Content events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContentLoaded:
    """A source file was read into a Content record (or served from cache).

    Attributes:
        path: Absolute path to the content file.
        cached: True if the record came from the store's cache.
        field_count: Number of front-matter fields on the record.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    cached: bool
    field_count: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TaskQueued:
    """A compile task was pushed onto the work queue.

    Attributes:
        path: Path relative to the task's base directory.
        base_dir: The task's base directory.
        reason: What scheduled the task.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    base_dir: str
    reason: Literal["entry", "include", "reference"]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class FileCompiled:
    """A source file finished compiling.

    Attributes:
        path: Absolute source path (the cache key).
        kind: Dispatch kind (``markdown``, ``html``, ``asset``).
        dynamic: True for cache-bypassing compiles.
        cached: True if the result was served from the compile cache.
        duration_ms: Time spent compiling in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    kind: str
    dynamic: bool
    cached: bool
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ScriptExecuted:
    """An embedded ``compile`` script ran inside the sandbox.

    Attributes:
        path: Source document that carried the script.
        duration_ms: Execution time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Output events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileWritten:
    """A compiled file was written to the output directory.

    Attributes:
        source: Source path relative to the source root.
        target: Absolute output path.
        size_bytes: Bytes written.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    target: str
    size_bytes: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type BuildEvent = (
    ContentLoaded
    | TaskQueued
    | FileCompiled
    | ScriptExecuted
    | FileWritten
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
