"""Content store — front matter + body records, memoized per build.

A source file starts with zero or more ``key=value`` lines.  The first line
that ends before an ``=`` is seen closes the front matter; everything from
that line on is the body.  Markdown bodies are rendered to HTML with Patitas
when the record is first loaded.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from mews._errors import ContentError, MissingFileError

if TYPE_CHECKING:
    from mews._types import Fields
    from mews.content.collection import ContentCollection
    from mews.observability.collector import BuildCollector


MARKDOWN_SUFFIX = ".md"


@dataclass(slots=True, eq=False)
class Content:
    """A parsed source file.

    Identity matters: the store hands out the same object for every lookup
    of the same absolute path, so ``eq`` is left as identity.

    Attributes:
        fields: Front-matter key/value pairs.
        body: Text after the front matter; HTML for Markdown sources.
        file_name: Base name without extension (``"hello"``).
        base_file_name: Relative path without extension (``"posts/hello"``).
        relative_path: Relative path as given (``"posts/hello.md"``).

    """

    fields: Fields = field(default_factory=dict)
    body: str = ""
    file_name: str = ""
    base_file_name: str = ""
    relative_path: str = ""

    def __getitem__(self, key: str) -> str:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return a front-matter field, or *default* when absent."""
        return self.fields.get(key, default)

    def attach_names(self, rel_path: str) -> None:
        """Derive the name fields from *rel_path*.

        Called on every lookup; the result depends only on *rel_path*, so
        repeated calls for the same path leave the record unchanged.
        """
        posix = PurePosixPath(rel_path)
        self.file_name = posix.stem
        self.base_file_name = str(posix.with_suffix("")) if posix.suffix else rel_path
        self.relative_path = rel_path


def parse_front_matter(text: str) -> tuple[Fields, str]:
    """Split *text* into front-matter fields and body.

    Scans character by character.  In key mode, ``=`` ends the key and
    switches to value mode; a newline ends the front matter.  In value mode,
    a newline stores the field and switches back to key mode.

    When the terminating line is empty, its newline is not part of the body,
    so ``"a=1\\n\\nBODY"`` yields body ``"BODY"``.  A line without ``=``
    (for example a Markdown heading) is kept whole in the body.

    Returns:
        ``(fields, body)``

    """
    fields: Fields = {}
    reading_key = True
    key = ""
    mark = 0

    for i, char in enumerate(text):
        if char == "=" and reading_key:
            key = text[mark:i]
            reading_key = False
            mark = i + 1
        elif char == "\n":
            if reading_key:
                if i == mark:
                    return fields, text[i + 1:]
                return fields, text[mark:]
            fields[key] = text[mark:i].removesuffix("\r")
            reading_key = True
            mark = i + 1

    if reading_key:
        return fields, text[mark:]
    fields[key] = text[mark:].removesuffix("\r")
    return fields, ""


def _default_markdown() -> Callable[[str], str]:
    from mews.content.markdown import MarkdownRenderer

    return MarkdownRenderer()


class ContentStore:
    """Path-keyed cache of Content records for one build run.

    Args:
        src_dir: Source root; ``lookup()`` resolves against it.
        markdown: Markdown-to-HTML renderer.  Defaults to a Patitas-backed
            ``MarkdownRenderer``, created on first use.
        collector: Optional build collector for load events.

    """

    def __init__(
        self,
        src_dir: Path,
        *,
        markdown: Callable[[str], str] | None = None,
        collector: BuildCollector | None = None,
    ) -> None:
        self._src_dir = src_dir
        self._markdown = markdown
        self._collector = collector
        self._cache: dict[Path, Content] = {}

    @property
    def src_dir(self) -> Path:
        """Source root directory."""
        return self._src_dir

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, path: object) -> bool:
        return path in self._cache

    def render_markdown(self, text: str) -> str:
        """Render Markdown *text* to HTML."""
        if self._markdown is None:
            self._markdown = _default_markdown()
        return self._markdown(text)

    def load(self, base_dir: Path, rel_path: str) -> Content:
        """Load the record for ``base_dir / rel_path``.

        Raises:
            MissingFileError: If the file does not exist.
            ContentError: If the path cannot be read as UTF-8 text.

        """
        abs_path = resolve_path(base_dir, rel_path)
        record = self._cache.get(abs_path)
        cached = record is not None

        if record is None:
            text = read_text(abs_path)
            fields, body = parse_front_matter(text)
            if abs_path.suffix.lower() == MARKDOWN_SUFFIX:
                body = self.render_markdown(body)
            record = Content(fields=fields, body=body)
            self._cache[abs_path] = record

        record.attach_names(rel_path)
        if self._collector is not None:
            self._collector.record_load(
                str(abs_path), cached=cached, field_count=len(record.fields),
            )
        return record

    def load_directory(self, base_dir: Path, rel_path: str) -> ContentCollection:
        """Load every file directly inside ``base_dir / rel_path``.

        Subdirectories are skipped; listings do not recurse.  Entries are
        loaded in name order.

        """
        from mews.content.collection import ContentCollection

        dir_path = resolve_path(base_dir, rel_path)
        try:
            entries = sorted(dir_path.iterdir(), key=lambda p: p.name)
        except FileNotFoundError as exc:
            msg = f"No such directory: {dir_path}"
            raise MissingFileError(msg) from exc

        return ContentCollection(
            self.load(base_dir, join_rel(rel_path, entry.name))
            for entry in entries
            if not entry.is_dir()
        )

    def lookup(self, rel_path: str) -> Content | ContentCollection:
        """Resolve *rel_path* against the source root.

        Returns a ContentCollection for directories, a Content record
        otherwise.  This is the ``content(path)`` script binding.

        """
        if resolve_path(self._src_dir, rel_path).is_dir():
            return self.load_directory(self._src_dir, rel_path)
        return self.load(self._src_dir, rel_path)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def resolve_path(base_dir: Path, rel_path: str) -> Path:
    """Join *rel_path* onto *base_dir* and normalize ``.``/``..`` segments.

    A leading ``/`` on *rel_path* is treated as source-root relative rather
    than filesystem absolute.
    """
    return Path(os.path.normpath(base_dir / rel_path.lstrip("/")))


def join_rel(rel_dir: str, name: str) -> str:
    """Join a relative directory and an entry name with POSIX separators."""
    if not rel_dir or rel_dir in (".", "/"):
        return name
    return f"{rel_dir.rstrip('/')}/{name}"


def read_text(path: Path) -> str:
    """Read *path* as UTF-8, mapping a missing file to MissingFileError."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"No such file: {path}"
        raise MissingFileError(msg) from exc
    except IsADirectoryError as exc:
        msg = f"Expected a file, found a directory: {path}"
        raise ContentError(msg) from exc
    except UnicodeDecodeError as exc:
        msg = f"Cannot decode {path} as UTF-8: {exc}"
        raise ContentError(msg) from exc
