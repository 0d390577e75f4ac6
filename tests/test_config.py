"""Tests for mews.config and mews.config_loader."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mews._errors import ConfigError
from mews.config import MewsConfig
from mews.config_loader import load_config


class TestMewsConfig:
    """MewsConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = MewsConfig()
        assert config.src_dir == "src"
        assert config.entry == "index.html"
        assert config.output is None
        assert config.write is True
        assert dict(config.settings) == {}

    def test_frozen(self) -> None:
        config = MewsConfig()
        with pytest.raises(AttributeError):
            config.entry = "other.html"  # type: ignore[misc]

    def test_settings_read_only(self) -> None:
        config = MewsConfig(settings={"title": "x"})
        with pytest.raises(TypeError):
            config.settings["title"] = "y"  # type: ignore[index]

    def test_paths_resolve_from_root(self, tmp_path: Path) -> None:
        config = MewsConfig(root=tmp_path, output=Path("dist"))
        assert config.src_path == tmp_path / "src"
        assert config.output_path == tmp_path / "dist"

    def test_absolute_output_preserved(self, tmp_path: Path) -> None:
        output = Path("/tmp/custom-output")
        config = MewsConfig(root=tmp_path, output=output)
        assert config.output_path == output

    def test_no_output_disables_writing(self, tmp_path: Path) -> None:
        config = MewsConfig(root=tmp_path)
        assert config.output_path is None
        assert config.writes_output is False

    def test_write_flag_disables_writing(self, tmp_path: Path) -> None:
        config = MewsConfig(root=tmp_path, output=Path("dist"), write=False)
        assert config.writes_output is False

    def test_relative_root_resolved_to_absolute(self) -> None:
        config = MewsConfig(root=Path("site"))
        assert config.root.is_absolute()


class TestLoadConfig:
    """load_config — config.json merged with overrides."""

    def test_missing_config_json_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.entry == "index.html"
        assert config.output is None

    def test_reads_src_and_out(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text(
            json.dumps({"src": "home.html", "out": "public", "title": "Site"})
        )
        config = load_config(tmp_path)
        assert config.entry == "home.html"
        assert config.output_path == tmp_path / "public"
        assert config.settings["title"] == "Site"

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text(json.dumps({"out": "public"}))
        config = load_config(tmp_path, output="build")
        assert config.output == Path("build")

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text(json.dumps({"out": "public"}))
        config = load_config(tmp_path, output=None, entry=None)
        assert config.output == Path("public")
        assert config.entry == "index.html"

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(tmp_path)

    def test_non_object_raises(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(tmp_path)

    def test_root_must_be_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="project directory required"):
            load_config(tmp_path / "missing")
