"""Build metadata exposed to scripts as ``build_info``."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BuildInfo:
    """When (and from which revision) the site was built.

    Attributes:
        date: Build start time, timezone-aware UTC.
        revision: Short git revision of the project, or None outside a
            repository (or without git installed).

    """

    date: datetime = field(default_factory=lambda: datetime.now(UTC))
    revision: str | None = None


def read_revision(root: Path) -> str | None:
    """Return ``git rev-parse --short HEAD`` for *root*, or None."""
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None
