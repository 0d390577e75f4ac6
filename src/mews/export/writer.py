"""Output writer — persist compiled files under the output directory.

Destination paths mirror the source tree; Markdown sources may have been
renamed by the compiler (``out`` front matter or ``.md`` -> ``.html``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mews._errors import BuildError

if TYPE_CHECKING:
    from mews.observability.log import EventLog


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single file written during a build.

    Attributes:
        source_path: Destination path relative to the output directory.
        output_path: Absolute filesystem path to the written file.
        size_bytes: Size of the written file in bytes.

    """

    source_path: str
    output_path: Path
    size_bytes: int


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Aggregate result of a build run.

    Attributes:
        compiled: Destination path -> compiled text or bytes, in discovery
            order.
        files: Files written (empty when writing is disabled).
        tasks: Number of compile tasks dequeued.
        duration_ms: Total wall-clock time for the build.
        output_dir: Absolute output directory, or None when unset.
        log: Events recorded during the build.

    """

    compiled: dict[str, str | bytes]
    files: tuple[ExportedFile, ...]
    tasks: int
    duration_ms: float
    output_dir: Path | None
    log: EventLog


def output_file_path(output_dir: Path, rel_path: str) -> Path:
    """Resolve *rel_path* under *output_dir*, refusing to escape it."""
    target = (output_dir / rel_path.lstrip("/")).resolve()
    if not target.is_relative_to(output_dir.resolve()):
        msg = f"Output path {rel_path!r} escapes the output directory"
        raise BuildError(msg)
    return target


def write_outputs(output_dir: Path, compiled: Mapping[str, str | bytes]) -> list[ExportedFile]:
    """Write every entry of *compiled* under *output_dir*, in order.

    Text is encoded as UTF-8; bytes are written unchanged and parent
    directories are created as needed.

    All destinations are resolved and checked before the first file is
    written, so an escaping or clashing path fails the batch with nothing
    on disk.

    Raises:
        BuildError: On an escaping or clashing path, or a failed write.

    """
    targets = [
        (rel_path, output_file_path(output_dir, rel_path), data)
        for rel_path, data in compiled.items()
    ]
    planned = {filepath for _, filepath, _ in targets}
    for rel_path, filepath, _ in targets:
        if any(parent in planned for parent in filepath.parents):
            msg = f"Output path {rel_path!r} needs a directory where another output is a file"
            raise BuildError(msg)
    return [_write(rel_path, filepath, data) for rel_path, filepath, data in targets]


def _write(rel_path: str, filepath: Path, data: str | bytes) -> ExportedFile:
    raw = data.encode("utf-8") if isinstance(data, str) else data
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_bytes(raw)
    except OSError as exc:
        msg = f"Cannot write {filepath}: {exc}"
        raise BuildError(msg) from exc
    return ExportedFile(source_path=rel_path, output_path=filepath, size_bytes=len(raw))
