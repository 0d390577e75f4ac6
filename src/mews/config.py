"""Mews configuration.

MewsConfig is the central configuration object, frozen after creation.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class MewsConfig:
    """Configuration for a single build run.

    Attributes:
        root: Path to the project root (contains ``config.json`` and ``src/``).
              Always resolved to an absolute path on construction.
        src_dir: Source directory name, relative to ``root``.
        entry: Entry file, relative to the source directory.  Seeds the
               work queue.
        output: Output directory.  ``None`` disables writing entirely.
        write: Set to False to compile everything without writing files.
        settings: The raw ``config.json`` object, exposed to build scripts
                  as ``config``.  Opaque to the pipeline itself.

    """

    root: Path = field(default_factory=Path.cwd)
    src_dir: str = "src"
    entry: str = "index.html"
    output: Path | None = None
    write: bool = True
    settings: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        # Scripts receive the settings; keep them read-only.
        if not isinstance(self.settings, MappingProxyType):
            object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    @property
    def src_path(self) -> Path:
        """Absolute path to the source directory."""
        return self.root / self.src_dir

    @property
    def output_path(self) -> Path | None:
        """Absolute path to the output directory, or None when unset."""
        if self.output is None:
            return None
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def writes_output(self) -> bool:
        """True when compiled files should be written to disk."""
        return self.write and self.output is not None
