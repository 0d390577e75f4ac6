"""Tests for mews.banner."""

from __future__ import annotations

import inspect
from pathlib import Path

import pytest

from mews.banner import print_banner
from mews.config import MewsConfig


class TestBanner:
    def test_shows_entry_and_output(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        print_banner(MewsConfig(root=tmp_path, entry="home.html", output=Path("dist")))
        err = capsys.readouterr().err
        assert "mews" in err
        assert "home.html" in err
        assert str(tmp_path / "dist") in err

    def test_output_disabled(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        print_banner(MewsConfig(root=tmp_path, output=Path("dist"), write=False))
        assert "disabled" in capsys.readouterr().err

    def test_takes_only_config(self) -> None:
        assert list(inspect.signature(print_banner).parameters) == ["config"]
