"""Shared test fixtures for mews."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mews.content.store import ContentStore
from mews.observability import BuildCollector
from mews.pipeline.compiler import Compiler
from mews.pipeline.queue import WorkQueue
from mews.pipeline.sandbox import SandboxContext


def fake_markdown(text: str) -> str:
    """Stand-in renderer: wraps the stripped text in a paragraph."""
    return f"<p>{text.strip()}</p>"


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project for testing.

    Returns the project root with ``config.json`` and a ``src/`` tree:
    an index page referencing a Markdown post and a stylesheet, a layout
    template for Markdown, and a logo image.
    """
    (tmp_path / "config.json").write_text(
        json.dumps({"src": "index.html", "out": "dist", "title": "Test Site"})
    )

    src = tmp_path / "src"
    (src / "posts").mkdir(parents=True)
    (src / "index.html").write_text(
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n"
        '<link rel="stylesheet" href="style.css" compile-ref>\n'
        "</head>\n<body>\n"
        '<h1 id="site"><script compile>config["title"]</script></h1>\n'
        '<a href="posts/hello.html" compile-ref="posts/hello.md">Hello</a>\n'
        '<img src="logo.png" compile-ref>\n'
        "</body>\n</html>\n"
    )
    (src / "layout.html").write_text(
        "<!DOCTYPE html>\n"
        "<html>\n<head></head>\n<body>\n"
        "<article><script compile>content.body</script></article>\n"
        "</body>\n</html>\n"
    )
    (src / "posts" / "hello.md").write_text(
        "template=layout.html\ntitle=Hello\ndate=2024-05-01\n\n# Hi\n"
    )
    (src / "style.css").write_text("body { margin: 0; }\n")
    (src / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n fake")

    return tmp_path


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    """An empty source directory."""
    src = tmp_path / "src"
    src.mkdir()
    return src


@pytest.fixture
def collector() -> BuildCollector:
    return BuildCollector()


@pytest.fixture
def queue() -> WorkQueue:
    return WorkQueue()


@pytest.fixture
def compiler(src_dir: Path, queue: WorkQueue, collector: BuildCollector) -> Compiler:
    """A Compiler over ``src_dir`` with a stand-in Markdown renderer."""
    store = ContentStore(src_dir, markdown=fake_markdown, collector=collector)
    return Compiler(src_dir, SandboxContext(), queue, store, collector=collector)


def queued_paths(queue: WorkQueue) -> list[str]:
    """Drain *queue* and return the relative paths in dequeue order."""
    paths = []
    while not queue.is_empty():
        paths.append(queue.dequeue().rel_path)
    return paths
