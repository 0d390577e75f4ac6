"""Shared type definitions for mews."""

from typing import NamedTuple


class RenamedOutput(NamedTuple):
    """Compiled text whose destination differs from its source path.

    Markdown sources compile to HTML under a new relative path (either the
    ``out`` front-matter field or the source path with an ``.html`` suffix).
    """

    text: str
    path: str


# Result of compiling one source file
type CompiledOutput = str | bytes | RenamedOutput

# Path relative to a compile task's base directory (POSIX separators)
type RelPath = str

# Front-matter key/value mapping
type Fields = dict[str, str]
