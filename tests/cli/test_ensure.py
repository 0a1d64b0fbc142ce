"""Tests for CLI Ensure utility class."""

from pathlib import Path

import pytest

from bindscope.cli.ensure import Ensure


class TestEnsureInvariant:
    """Tests for Ensure.invariant method."""

    def test_passes_when_true(self) -> None:
        Ensure.invariant(True, "Should not fail")

    def test_exits_when_false(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ensure.invariant exits 1 with a red Error prefix on stderr."""
        with pytest.raises(SystemExit) as exc_info:
            Ensure.invariant(False, "Options conflict")

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert "Options conflict" in captured.err
        assert captured.out == ""


class TestEnsurePathIsFile:
    """Tests for Ensure.path_is_file method."""

    def test_passes_for_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bindscope.toml"
        config_path.write_text("", encoding="utf-8")

        Ensure.path_is_file(config_path)

    def test_default_message(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        missing = tmp_path / "bindscope.toml"

        with pytest.raises(SystemExit) as exc_info:
            Ensure.path_is_file(missing)

        assert exc_info.value.code == 1
        assert f"Config file not found: {missing}" in capsys.readouterr().err

    def test_directory_is_not_a_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit):
            Ensure.path_is_file(tmp_path, "Expected a config file")

        assert "Expected a config file" in capsys.readouterr().err


class TestEnsureNotNone:
    """Tests for Ensure.not_none method."""

    def test_returns_value_when_not_none(self) -> None:
        assert Ensure.not_none("/tmp/registry", "Value is None") == "/tmp/registry"

    def test_empty_string_is_not_none(self) -> None:
        assert Ensure.not_none("", "Value is None") == ""

    def test_exits_when_none(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            Ensure.not_none(None, "Could not determine the dev registry directory")

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert "Could not determine the dev registry directory" in captured.err
