"""Mews error hierarchy.

All mews-specific errors inherit from MewsError for easy catching.
"""


class MewsError(Exception):
    """Base error for all mews operations."""


class ConfigError(MewsError):
    """Invalid or missing project configuration."""


class ContentError(MewsError):
    """Error in content processing (reading, front matter, lookup)."""


class MissingFileError(ContentError):
    """A referenced source path does not exist."""


class MissingTemplateError(ContentError):
    """A Markdown record declares no ``template`` field."""


class CompileError(MewsError):
    """Error while compiling a single source file."""


class UnsupportedKindError(CompileError):
    """The file extension is not in the compile dispatch table."""


class ScriptError(CompileError):
    """An embedded build-time script failed during sandboxed execution."""


class BuildError(MewsError):
    """The build aborted because a compile task failed."""
