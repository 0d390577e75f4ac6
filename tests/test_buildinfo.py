"""Tests for mews.buildinfo."""

from __future__ import annotations

import subprocess
from datetime import UTC
from pathlib import Path
from unittest.mock import patch

from mews.buildinfo import BuildInfo, read_revision


class TestBuildInfo:
    def test_date_is_utc(self) -> None:
        assert BuildInfo().date.tzinfo is UTC

    def test_revision_defaults_to_none(self) -> None:
        assert BuildInfo().revision is None


class TestReadRevision:
    """read_revision — git rev-parse with graceful fallback."""

    def test_returns_short_hash(self, tmp_path: Path) -> None:
        done = subprocess.CompletedProcess(args=[], returncode=0, stdout="abc1234\n", stderr="")
        with patch("mews.buildinfo.subprocess.run", return_value=done) as run:
            assert read_revision(tmp_path) == "abc1234"
        assert run.call_args.kwargs["cwd"] == tmp_path
        assert run.call_args.args[0] == ["git", "rev-parse", "--short", "HEAD"]

    def test_not_a_repository(self, tmp_path: Path) -> None:
        done = subprocess.CompletedProcess(
            args=[], returncode=128, stdout="", stderr="fatal: not a git repository",
        )
        with patch("mews.buildinfo.subprocess.run", return_value=done):
            assert read_revision(tmp_path) is None

    def test_git_not_installed(self, tmp_path: Path) -> None:
        with patch("mews.buildinfo.subprocess.run", side_effect=FileNotFoundError("git")):
            assert read_revision(tmp_path) is None

    def test_empty_output(self, tmp_path: Path) -> None:
        done = subprocess.CompletedProcess(args=[], returncode=0, stdout="\n", stderr="")
        with patch("mews.buildinfo.subprocess.run", return_value=done):
            assert read_revision(tmp_path) is None
