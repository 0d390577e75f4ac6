"""Compiler — per-file compilation dispatch and dependency discovery.

Dispatch is by lowercase file extension:

    .md                     Markdown record rendered into its template
    .html                   page with scripts run and compile-refs scheduled
    .css .png .jpg .jpeg    raw bytes, passed through

Results are cached by absolute source path.  The cache doubles as the
visited set for the work queue: a discovered reference is only scheduled
when it has no cached result yet.  Dynamic compiles neither read nor
populate the cache.
"""

from __future__ import annotations

import enum
import time
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Literal

from mews._errors import (
    CompileError,
    MissingFileError,
    MissingTemplateError,
    UnsupportedKindError,
)
from mews._types import CompiledOutput, RenamedOutput
from mews.content.store import join_rel, read_text, resolve_path
from mews.pipeline.dom import DomQuery, HtmlDocument, replace_element
from mews.pipeline.queue import CompileTask, WorkQueue
from mews.pipeline.sandbox import SandboxContext, run_script

if TYPE_CHECKING:
    from mews.content.store import Content, ContentStore
    from mews.observability.collector import BuildCollector


COMPILE_ATTR = "compile"
COMPILE_REF_ATTR = "compile-ref"


class ContentKind(enum.Enum):
    """How a source file is compiled, selected by its extension."""

    MARKDOWN = "markdown"
    HTML = "html"
    ASSET = "asset"


_KIND_BY_SUFFIX: dict[str, ContentKind] = {
    ".md": ContentKind.MARKDOWN,
    ".html": ContentKind.HTML,
    ".css": ContentKind.ASSET,
    ".png": ContentKind.ASSET,
    ".jpg": ContentKind.ASSET,
    ".jpeg": ContentKind.ASSET,
}

# (xpath, attribute holding the referenced path)
_REFERENCE_PATTERNS: tuple[tuple[str, str], ...] = (
    (f"//a[@{COMPILE_REF_ATTR}]", COMPILE_REF_ATTR),
    (f'//link[@{COMPILE_REF_ATTR}][@rel="stylesheet"]', "href"),
    (f"//img[@{COMPILE_REF_ATTR}]", "src"),
)


def kind_for(rel_path: str) -> ContentKind:
    """Return the ContentKind for *rel_path*.

    Raises:
        UnsupportedKindError: If the extension is not compilable.

    """
    kind = _KIND_BY_SUFFIX.get(PurePosixPath(rel_path).suffix.lower())
    if kind is None:
        msg = f"do not know how to compile {rel_path!r}"
        raise UnsupportedKindError(msg)
    return kind


def markdown_output_path(rel_path: str, record: Content) -> str:
    """Destination for a compiled Markdown record.

    ``out`` in the front matter names the file next to the source;
    otherwise the source suffix becomes ``.html``.
    """
    source = PurePosixPath(rel_path)
    out = record.get("out")
    if out:
        return str(source.parent / out)
    return str(source.with_suffix(".html"))


def _excluded(name: str, excluded: frozenset[str]) -> bool:
    ext = name if name.startswith(".") else PurePosixPath(name).suffix
    return ext[1:].lower() in excluded


class Compiler:
    """Compiles source files and schedules the files they reference.

    Binds ``include``, ``compile_file`` and ``compile_dyn`` into *context*
    on construction so build scripts can drive the compiler.

    Args:
        src_dir: Source root; Markdown templates and ``include`` paths
            resolve against it.
        context: Base sandbox context for the run.
        queue: Work queue that discovered dependencies are pushed onto.
        store: Content store for Markdown records.
        collector: Optional build collector for compile events.

    """

    def __init__(
        self,
        src_dir: Path,
        context: SandboxContext,
        queue: WorkQueue,
        store: ContentStore,
        *,
        collector: BuildCollector | None = None,
    ) -> None:
        self.src_dir = src_dir
        self.cwd = src_dir
        self._context = context
        self._queue = queue
        self._store = store
        self._collector = collector
        self._cache: dict[Path, CompiledOutput] = {}

        context.bind(
            include=self.include,
            compile_file=self.compile,
            compile_dyn=self.compile_dyn,
        )

    @property
    def context(self) -> SandboxContext:
        return self._context

    def __len__(self) -> int:
        """Number of cached compile results."""
        return len(self._cache)

    def is_cached(self, rel_path: str) -> bool:
        """True if *rel_path* (relative to ``cwd``) has a cached result."""
        return resolve_path(self.cwd, rel_path) in self._cache

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def compile(self, rel_path: str, *, dynamic: bool = False) -> CompiledOutput:
        """Compile *rel_path* relative to ``cwd``.

        Args:
            rel_path: Source path relative to the current working directory.
            dynamic: Recompute even when cached, and do not cache the result.

        Raises:
            UnsupportedKindError: Unknown extension.
            MissingFileError: The source (or its template) does not exist.
            MissingTemplateError: A Markdown record has no ``template``.
            ScriptError: An embedded script failed.

        """
        abs_path = resolve_path(self.cwd, rel_path)
        kind = kind_for(rel_path)

        if not dynamic and abs_path in self._cache:
            if self._collector is not None:
                self._collector.record_compile(str(abs_path), kind.value, cached=True)
            return self._cache[abs_path]

        t0 = time.perf_counter()
        if kind is ContentKind.MARKDOWN:
            result: CompiledOutput = self._compile_markdown(rel_path)
        elif kind is ContentKind.HTML:
            result = self._compile_html(rel_path, abs_path)
        else:
            result = self._compile_asset(abs_path)
        elapsed = (time.perf_counter() - t0) * 1000

        if not dynamic:
            self._cache[abs_path] = result
        if self._collector is not None:
            self._collector.record_compile(
                str(abs_path), kind.value, dynamic=dynamic, duration_ms=elapsed,
            )
        return result

    def compile_dyn(self, rel_path: str) -> CompiledOutput:
        """Compile *rel_path* without touching the cache."""
        return self.compile(rel_path, dynamic=True)

    def _compile_markdown(self, rel_path: str) -> RenamedOutput:
        record = self._store.load(self.cwd, rel_path)
        template = record.get("template")
        if not template:
            msg = f"{rel_path!r} has no 'template' field; cannot compile"
            raise MissingTemplateError(msg)

        document = HtmlDocument.parse(read_text(resolve_path(self.src_dir, template)))
        self._run_scripts(document, self._context.derive(content=record), rel_path)
        return RenamedOutput(document.serialize(), markdown_output_path(rel_path, record))

    def _compile_html(self, rel_path: str, abs_path: Path) -> str:
        document = HtmlDocument.parse(read_text(abs_path))
        self._run_scripts(document, self._context.derive(dom=DomQuery(document)), rel_path)
        self._discover_references(document)
        return document.serialize()

    @staticmethod
    def _compile_asset(abs_path: Path) -> bytes:
        try:
            return abs_path.read_bytes()
        except FileNotFoundError as exc:
            msg = f"No such file: {abs_path}"
            raise MissingFileError(msg) from exc

    def _run_scripts(
        self,
        document: HtmlDocument,
        context: SandboxContext,
        rel_path: str,
    ) -> None:
        """Run every ``compile``-marked element and splice in its result."""
        namespace = context.namespace()
        for element in document.xpath(f"//*[@{COMPILE_ATTR}]"):
            # An earlier replacement may have removed this element.
            if not document.contains(element):
                continue
            t0 = time.perf_counter()
            result = run_script(element.text_content(), namespace, filename=rel_path)
            if self._collector is not None:
                self._collector.record_script(rel_path, (time.perf_counter() - t0) * 1000)
            replace_element(element, result)

    def _discover_references(self, document: HtmlDocument) -> None:
        """Strip compile-ref markers and schedule uncached targets."""
        for expr, attr in _REFERENCE_PATTERNS:
            for element in document.xpath(expr):
                ref = element.get(attr) or element.get("href") or ""
                del element.attrib[COMPILE_REF_ATTR]
                ref = ref.lstrip("/")
                if not ref:
                    msg = f"<{element.tag} {COMPILE_REF_ATTR}> has no path to compile"
                    raise CompileError(msg)
                if not self.is_cached(ref):
                    self._enqueue(ref, "reference")

    # ------------------------------------------------------------------
    # Inclusion
    # ------------------------------------------------------------------

    def include(
        self,
        include_path: str,
        exclude_ext: list[str] | tuple[str, ...] | None = None,
    ) -> str | list[str]:
        """Schedule *include_path* for compilation without compiling it now.

        Directories are walked recursively and every file is scheduled.
        *exclude_ext* filters by extension, case-insensitively; a dotfile's
        extension is its name without the leading dot (``.DS_Store`` ->
        ``ds_store``).

        Returns:
            The path for a file, or the flattened list of scheduled file
            paths for a directory.

        Raises:
            MissingFileError: If the path does not exist.

        """
        excluded = frozenset(ext.lstrip(".").lower() for ext in exclude_ext or ())
        return self._include(include_path, excluded)

    def _include(self, include_path: str, excluded: frozenset[str]) -> str | list[str]:
        target = resolve_path(self.src_dir, include_path)
        if target.is_dir():
            included: list[str] = []
            for entry in sorted(target.iterdir(), key=lambda p: p.name):
                if excluded and _excluded(entry.name, excluded):
                    continue
                child = self._include(join_rel(include_path, entry.name), excluded)
                if isinstance(child, list):
                    included.extend(child)
                else:
                    included.append(child)
            return included
        if not target.exists():
            msg = f"No such file or directory to include: {target}"
            raise MissingFileError(msg)
        self._enqueue(include_path, "include")
        return include_path

    def _enqueue(
        self,
        rel_path: str,
        reason: Literal["entry", "include", "reference"],
    ) -> None:
        self._queue.enqueue(CompileTask(self.cwd, rel_path))
        if self._collector is not None:
            self._collector.record_queued(rel_path, str(self.cwd), reason)
