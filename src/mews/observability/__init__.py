"""Build observability — structured events for the compile pipeline.

Records what the pipeline did during a build:
- **Content**: store loads and cache hits
- **Queue**: tasks scheduled from the entry, ``include`` or ``compile-ref``
- **Compiler**: per-file compiles, cache hits, sandboxed script runs
- **Output**: files written to the output directory

All events are frozen dataclasses with monotonic nanosecond timestamps.

Quick Start:
    >>> from mews.observability import BuildCollector, EventLog, FileCompiled
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> collector.record_compile("/site/src/index.html", "html")
    >>> [e.path for e in log.query(event_type=FileCompiled)]
    ['/site/src/index.html']

"""

from mews.observability.collector import BuildCollector
from mews.observability.console import ScriptConsole
from mews.observability.events import (
    BuildEvent,
    ContentLoaded,
    FileCompiled,
    FileWritten,
    ScriptExecuted,
    TaskQueued,
    now_ns,
)
from mews.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildEvent",
    "ContentLoaded",
    "EventLog",
    "FileCompiled",
    "FileWritten",
    "ScriptConsole",
    "ScriptExecuted",
    "TaskQueued",
    "now_ns",
]
