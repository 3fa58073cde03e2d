"""Test the command-line wrapper."""

import importlib

import pytest

from bgg_library.database import CatalogDatabase
from bgg_library.models import EnrichedFields

from conftest import FakeClient, transient

cli = importlib.import_module("bgg_library.cli.main")


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "catalog.db"
    db = CatalogDatabase(path)
    db.add_game(EnrichedFields(title="Azul"))
    db.add_game(EnrichedFields(title="Catan"))
    return path


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


def _use_client(monkeypatch, fake):
    monkeypatch.setattr(cli, "EnrichmentClient", lambda **kwargs: fake)


def test_backfill_success_exits_zero(monkeypatch, db_path, capsys):
    _use_client(monkeypatch, FakeClient(default='{"suggestedAge": 10, "confidence": "high"}'))

    code = cli.main(["--db", str(db_path), "backfill", "--field", "suggested_age", "--delay", "0"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Successfully updated:  2" in out
    assert CatalogDatabase(db_path).list_missing("suggested_age") == []


def test_backfill_with_failures_exits_nonzero(monkeypatch, db_path):
    _use_client(monkeypatch, FakeClient(
        {"Azul": [transient()] * 3, "Catan": ['{"suggestedAge": 10}']}
    ))

    code = cli.main(["--db", str(db_path), "backfill", "--delay", "0"])

    assert code == 1


def test_backfill_nothing_to_do_exits_zero(monkeypatch, tmp_path):
    fake = FakeClient()
    _use_client(monkeypatch, fake)

    code = cli.main(["--db", str(tmp_path / "empty.db"), "backfill", "--delay", "0"])

    assert code == 0
    assert fake.calls == []


def test_list_missing_makes_no_calls(monkeypatch, db_path, capsys):
    def refuse(**kwargs):
        raise AssertionError("client should not be built")
    monkeypatch.setattr(cli, "EnrichmentClient", refuse)

    code = cli.main(["--db", str(db_path), "backfill", "--field", "bgg_rank", "--list-missing"])

    assert code == 0
    out = capsys.readouterr().out
    assert "- Azul" in out
    assert "Total missing: 2" in out


def test_analyze_image_saves_games(monkeypatch, db_path, tmp_path):
    image = tmp_path / "shelf.jpg"
    image.write_bytes(b"jpeg bytes")
    _use_client(monkeypatch, FakeClient(default='{"games": [{"title": "Wingspan"}, {"title": "Azul"}]}'))

    code = cli.main(["--db", str(db_path), "analyze-image", str(image), "--save"])

    assert code == 0
    db = CatalogDatabase(db_path)
    assert db.find_game_by_title("Wingspan") is not None
    assert db.get_statistics()["total_games_in_db"] == 3


def test_stats(db_path, capsys):
    assert cli.main(["--db", str(db_path), "stats"]) == 0
    assert "Total games in database: 2" in capsys.readouterr().out


def test_negative_limit_rejected(monkeypatch, db_path):
    fake = FakeClient(default='{"suggestedAge": 10}')
    _use_client(monkeypatch, fake)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--db", str(db_path), "backfill", "--limit", "-1", "--delay", "0"])

    assert exc.value.code == 2
    assert fake.calls == []


def test_zero_limit_processes_nothing(monkeypatch, db_path):
    fake = FakeClient(default='{"suggestedAge": 10}')
    _use_client(monkeypatch, fake)

    assert cli.main(["--db", str(db_path), "backfill", "--limit", "0", "--delay", "0"]) == 0
    assert fake.calls == []


def test_analyze_missing_image_reports_error(monkeypatch, db_path, tmp_path, capsys):
    fake = FakeClient()
    _use_client(monkeypatch, fake)

    code = cli.main(["--db", str(db_path), "analyze-image", str(tmp_path / "nope.jpg")])

    assert code == 1
    assert "Could not read image" in capsys.readouterr().out
    assert fake.calls == []
