"""Tests for songstore.cli module."""

from pathlib import Path

import pytest

from songstore import cli
from songstore.settings import settings


@pytest.fixture
def cli_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "cli.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{path}")
    return path


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr("sys.argv", ["songstore", *args])
    cli.main()


class TestCli:
    def test_init_creates_database(self, cli_db: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _run(monkeypatch, "init")
        assert cli_db.exists()

    def test_stats_on_empty_store(
        self, cli_db: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _run(monkeypatch, "stats")

        out = capsys.readouterr().out
        assert "Songs:         0" in out
        assert "Fingerprints:  0" in out

    def test_clear_collection(
        self, cli_db: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _run(monkeypatch, "clear", "fingerprints")

        assert "Deleted 0 rows from fingerprints" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "args",
        [(), ("bogus",), ("clear",), ("clear", "users"), ("clear", "songs", "extra")],
    )
    def test_bad_arguments_exit_non_zero(
        self, cli_db: Path, monkeypatch: pytest.MonkeyPatch, args: tuple[str, ...]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, *args)
        assert exc_info.value.code == 1

    def test_storage_error_exits_non_zero(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        missing = tmp_path / "missing" / "cli.db"
        monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{missing}")

        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "stats")
        assert exc_info.value.code == 1
