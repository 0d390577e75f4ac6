"""Work queue — FIFO of pending compile tasks.

The queue is the build's worklist: the driver seeds it with the entry file
and the compiler appends every dependency it discovers.  It does no
deduplication; the compiler's cache is the visited set.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path

from mews.content.store import resolve_path


@dataclass(frozen=True, slots=True)
class CompileTask:
    """A file to compile, relative to a base directory.

    Attributes:
        base_dir: Directory the path is relative to (the compiler's ``cwd``
            while this task runs).
        rel_path: Path relative to *base_dir*, POSIX separators.

    """

    base_dir: Path
    rel_path: str

    @property
    def absolute_path(self) -> Path:
        """Normalized absolute path; the task's identity for caching."""
        return resolve_path(self.base_dir, self.rel_path)


class WorkQueue:
    """First-in, first-out queue of CompileTasks."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: deque[CompileTask] = deque()

    def enqueue(self, task: CompileTask) -> None:
        """Add *task* at the back of the queue."""
        self._tasks.append(task)

    def dequeue(self) -> CompileTask:
        """Remove and return the task at the front of the queue.

        Raises:
            IndexError: If the queue is empty.

        """
        return self._tasks.popleft()

    def is_empty(self) -> bool:
        return not self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
