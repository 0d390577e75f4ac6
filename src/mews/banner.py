"""Startup banner — build status output.

Prints a short banner naming the project, entry file and output target.
Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mews.config import MewsConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""


def print_banner(config: MewsConfig) -> None:
    """Print the Mews build banner to stderr.

    Args:
        config: Resolved MewsConfig.

    """
    from mews import __version__

    lines: list[str] = [
        "",
        f"  {_ORANGE}{_BOLD}mews{_RESET} {_DIM}v{__version__}{_RESET}  {_YELLOW}[build]{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} source: {_DIM}{config.src_path}{_RESET}",
        f"  {_DIM}├─{_RESET} entry: {config.entry}",
    ]

    if config.writes_output:
        lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}")
    else:
        lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}disabled{_RESET}")

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
