"""Script console — the ``log`` capability handed to build scripts.

Writes level-prefixed lines to stderr, matching the rest of the build
output.  Scripts never get ``sys`` or ``print`` access to real streams.
"""

from __future__ import annotations

import sys
from typing import TextIO


class ScriptConsole:
    """Minimal logger exposed to sandboxed scripts.

    Args:
        stream: Destination stream.  Defaults to ``sys.stderr`` at call
            time so pytest's capture sees the output.

    """

    __slots__ = ("_stream",)

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _emit(self, level: str, args: tuple[object, ...]) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        message = " ".join(str(arg) for arg in args)
        print(f"  [{level}] {message}", file=stream)

    def info(self, *args: object) -> None:
        self._emit("info", args)

    def log(self, *args: object) -> None:
        self._emit("info", args)

    def warn(self, *args: object) -> None:
        self._emit("warn", args)

    def error(self, *args: object) -> None:
        self._emit("error", args)
