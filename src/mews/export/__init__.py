"""Export layer — writing compiled output to disk."""

from mews.export.writer import BuildResult, ExportedFile, write_outputs

__all__ = [
    "BuildResult",
    "ExportedFile",
    "write_outputs",
]
