import pytest
from typer.testing import CliRunner

from syncmatch.main import app
from syncmatch.store import CsvParticipantStore


runner = CliRunner()


@pytest.fixture
def paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in ("SYNCMATCH_BOT_USER_ID", "SYNCMATCH_SEED", "SYNCMATCH_MAX_FACTS"):
        monkeypatch.delenv(var, raising=False)
    roster = tmp_path / "roster.csv"
    store = tmp_path / "participants.csv"
    return roster, store


def _invoke(paths, *args):
    roster, store = paths
    return runner.invoke(app, ["--roster", str(roster), "--store", str(store), *args])


def test_bio_add_show_remove(paths):
    result = _invoke(paths, "bio", "add", "U1", "I like tea")
    assert result.exit_code == 0, result.output
    _invoke(paths, "bio", "add", "U1", "I bike to work")

    result = _invoke(paths, "bio", "show", "U1")
    assert result.exit_code == 0
    assert "0: I like tea" in result.output
    assert "1: I bike to work" in result.output

    result = _invoke(paths, "bio", "remove", "U1", "0")
    assert result.exit_code == 0
    assert CsvParticipantStore(paths[1]).get_facts("U1") == ["I bike to work"]


def test_bio_errors_exit_non_zero(paths):
    assert _invoke(paths, "bio", "show", "U1").exit_code == 1
    assert _invoke(paths, "bio", "remove", "U1", "0").exit_code == 1
    _invoke(paths, "bio", "add", "U1", "fact")
    assert _invoke(paths, "bio", "remove", "U1", "5").exit_code == 1
    assert _invoke(paths, "bio", "add", "U1", "   ").exit_code == 1


def test_prefer_sets_location(paths):
    result = _invoke(paths, "prefer", "U1", "virtual")
    assert result.exit_code == 0
    assert CsvParticipantStore(paths[1]).get("U1").location_pref == "virtual"


def test_run_writes_history(paths):
    roster, store = paths
    roster.write_text("user_id\nU1\nU2\nU3\nU4\nU5\n")

    result = _invoke(paths, "--seed", "5", "run")
    assert result.exit_code == 0, result.output

    records = CsvParticipantStore(store).get_many(["U1", "U2", "U3", "U4", "U5"])
    assert len(records) == 5
    lengths = sorted(len(r.last_three_matched) for r in records.values())
    assert lengths == [1, 1, 2, 2, 2]


def test_match_and_dry_run_write_nothing(paths):
    roster, store = paths
    roster.write_text("user_id\nU1\nU2\nU3\nU4\n")

    assert _invoke(paths, "match").exit_code == 0
    assert _invoke(paths, "run", "--dry-run").exit_code == 0
    assert not store.exists()


def test_history_command(paths):
    roster, store = paths
    CsvParticipantStore(store).append_recent_partners("U1", ["U2", "U3", "U4", "U5"])
    result = _invoke(paths, "history", "U1")
    assert result.exit_code == 0
    assert "U3, U4, U5" in result.output
    assert "U2" not in result.output


def test_small_roster_is_reported(paths):
    roster, _ = paths
    roster.write_text("user_id\nU1\n")
    result = _invoke(paths, "run")
    assert result.exit_code == 1
    assert "at least 2" in result.output


def test_missing_roster_is_reported(paths):
    result = _invoke(paths, "match")
    assert result.exit_code == 1
    assert "Error" in result.output


def test_run_with_repeated_roster_ids(paths):
    roster, store = paths
    roster.write_text("user_id\nU1\nU1\nU2\nU3\n")
    result = _invoke(paths, "run")
    assert result.exit_code == 0, result.output
    assert sorted(CsvParticipantStore(store).get("U1").last_three_matched) == ["U2", "U3"]


def test_prefer_rejects_unknown_token(paths):
    result = _invoke(paths, "prefer", "U1", "in-persn")
    assert result.exit_code == 1
    assert not paths[1].exists()


def test_bio_show_notes_fact_limit(paths):
    for fact in ("one", "two", "three"):
        _invoke(paths, "bio", "add", "U1", fact)
    assert "Note: only 3 facts" not in _invoke(paths, "bio", "show", "U1").output

    _invoke(paths, "bio", "add", "U1", "four")
    result = _invoke(paths, "bio", "show", "U1")
    assert result.exit_code == 0
    assert "Note: only 3 facts" in result.output


def test_malformed_store_cell_is_reported(paths):
    roster, store = paths
    roster.write_text("user_id\nU1\nU2\n")
    store.write_text("user_id,location_pref,last_three_matched,facts\nU1,,[not json,\n")
    for command in ("match", "run"):
        result = _invoke(paths, command)
        assert result.exit_code == 1
        assert "Error" in result.output
