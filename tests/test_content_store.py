"""Tests for mews.content.store — front matter and the content cache."""

from __future__ import annotations

from pathlib import Path

import pytest

from mews._errors import MissingFileError
from mews.content.collection import ContentCollection
from mews.content.store import Content, ContentStore, join_rel, parse_front_matter, resolve_path

from .conftest import fake_markdown


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------


class TestParseFrontMatter:
    """parse_front_matter — key=value lines up to the first blank key."""

    def test_fields_and_body(self) -> None:
        fields, body = parse_front_matter("a=1\nb=2\n\nBODY")
        assert fields == {"a": "1", "b": "2"}
        assert body == "BODY"

    def test_no_front_matter(self) -> None:
        fields, body = parse_front_matter("# Title\n\nText\n")
        assert fields == {}
        assert body == "# Title\n\nText\n"

    def test_line_without_equals_ends_front_matter(self) -> None:
        fields, body = parse_front_matter("a=1\n# Heading\nmore")
        assert fields == {"a": "1"}
        assert body == "# Heading\nmore"

    def test_equals_inside_value_kept(self) -> None:
        fields, _ = parse_front_matter("url=/search?q=x\n\n")
        assert fields == {"url": "/search?q=x"}

    def test_empty_value(self) -> None:
        fields, body = parse_front_matter("draft=\n\nbody")
        assert fields == {"draft": ""}
        assert body == "body"

    def test_value_at_end_of_input(self) -> None:
        assert parse_front_matter("a=1") == ({"a": "1"}, "")

    def test_body_without_newline(self) -> None:
        assert parse_front_matter("# Hi") == ({}, "# Hi")

    def test_empty_input(self) -> None:
        assert parse_front_matter("") == ({}, "")

    def test_carriage_return_stripped_from_values(self) -> None:
        fields, _ = parse_front_matter("title=Hello\r\n\r\nbody")
        assert fields == {"title": "Hello"}

    def test_later_key_overwrites(self) -> None:
        fields, _ = parse_front_matter("a=1\na=2\n\n")
        assert fields == {"a": "2"}


# ---------------------------------------------------------------------------
# Content record
# ---------------------------------------------------------------------------


class TestContent:
    """Content — field access and derived names."""

    def test_field_access(self) -> None:
        record = Content(fields={"title": "Hi"})
        assert record["title"] == "Hi"
        assert record.get("missing") is None
        assert record.get("missing", "x") == "x"
        assert "title" in record
        assert "missing" not in record

    def test_attach_names(self) -> None:
        record = Content()
        record.attach_names("posts/hello.md")
        assert record.file_name == "hello"
        assert record.base_file_name == "posts/hello"
        assert record.relative_path == "posts/hello.md"

    def test_attach_names_without_extension(self) -> None:
        record = Content()
        record.attach_names("notes/README")
        assert record.file_name == "README"
        assert record.base_file_name == "notes/README"

    def test_equality_is_identity(self) -> None:
        assert Content(body="x") != Content(body="x")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def _store(src: Path) -> ContentStore:
    return ContentStore(src, markdown=fake_markdown)


class TestContentStore:
    """ContentStore — load, cache and directory listing."""

    def test_load_parses_and_renders_markdown(self, src_dir: Path) -> None:
        (src_dir / "post.md").write_text("title=Hi\n\nHello world\n")
        record = _store(src_dir).load(src_dir, "post.md")
        assert record.fields == {"title": "Hi"}
        assert record.body == "<p>Hello world</p>"

    def test_non_markdown_body_verbatim(self, src_dir: Path) -> None:
        (src_dir / "snippet.html").write_text("kind=partial\n\n<b>raw</b>\n")
        record = _store(src_dir).load(src_dir, "snippet.html")
        assert record.body == "<b>raw</b>\n"

    def test_uppercase_markdown_suffix_rendered(self, src_dir: Path) -> None:
        (src_dir / "NOTE.MD").write_text("text")
        record = _store(src_dir).load(src_dir, "NOTE.MD")
        assert record.body == "<p>text</p>"

    def test_same_path_returns_same_record(self, src_dir: Path) -> None:
        (src_dir / "post.md").write_text("a=1\n\nx")
        store = _store(src_dir)
        first = store.load(src_dir, "post.md")
        second = store.load(src_dir, "post.md")
        assert first is second
        assert len(store) == 1

    def test_cached_record_not_reread(self, src_dir: Path) -> None:
        path = src_dir / "post.md"
        path.write_text("a=1\n\nx")
        store = _store(src_dir)
        store.load(src_dir, "post.md")
        path.write_text("a=2\n\ny")
        assert store.load(src_dir, "post.md").fields == {"a": "1"}

    def test_names_recomputed_per_call(self, src_dir: Path) -> None:
        (src_dir / "posts").mkdir()
        (src_dir / "posts" / "hello.md").write_text("x")
        store = _store(src_dir)
        record = store.load(src_dir, "posts/hello.md")
        assert record.relative_path == "posts/hello.md"

        again = store.load(src_dir / "posts", "hello.md")
        assert again is record
        assert record.relative_path == "hello.md"
        assert record.base_file_name == "hello"
        assert record.file_name == "hello"

    def test_missing_file_raises(self, src_dir: Path) -> None:
        with pytest.raises(MissingFileError, match="No such file"):
            _store(src_dir).load(src_dir, "nope.md")

    def test_default_renderer_is_created_lazily(self, src_dir: Path) -> None:
        store = ContentStore(src_dir)
        (src_dir / "data.txt").write_text("k=v\n")
        store.load(src_dir, "data.txt")
        assert store._markdown is None

    def test_load_directory(self, src_dir: Path) -> None:
        posts = src_dir / "posts"
        (posts / "drafts").mkdir(parents=True)
        (posts / "b.md").write_text("title=B\n\nb")
        (posts / "a.md").write_text("title=A\n\na")
        (posts / "drafts" / "c.md").write_text("title=C\n\nc")

        store = _store(src_dir)
        collection = store.load_directory(src_dir, "posts")

        assert isinstance(collection, ContentCollection)
        assert [r["title"] for r in collection] == ["A", "B"]
        assert collection[0] is store.load(src_dir, "posts/a.md")

    def test_load_directory_missing(self, src_dir: Path) -> None:
        with pytest.raises(MissingFileError, match="No such directory"):
            _store(src_dir).load_directory(src_dir, "nope")

    def test_lookup_file_and_directory(self, src_dir: Path) -> None:
        (src_dir / "posts").mkdir()
        (src_dir / "posts" / "a.md").write_text("title=A\n\n")
        store = _store(src_dir)

        assert isinstance(store.lookup("posts"), ContentCollection)
        record = store.lookup("posts/a.md")
        assert isinstance(record, Content)
        assert record.relative_path == "posts/a.md"


class TestPathHelpers:
    """resolve_path / join_rel."""

    def test_resolve_normalizes(self, tmp_path: Path) -> None:
        assert resolve_path(tmp_path, "a/../b.md") == tmp_path / "b.md"

    def test_resolve_leading_slash_is_relative(self, tmp_path: Path) -> None:
        assert resolve_path(tmp_path, "/style.css") == tmp_path / "style.css"

    def test_join_rel(self) -> None:
        assert join_rel("posts", "a.md") == "posts/a.md"
        assert join_rel("posts/", "a.md") == "posts/a.md"
        assert join_rel("", "a.md") == "a.md"
        assert join_rel(".", "a.md") == "a.md"
