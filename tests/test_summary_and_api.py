"""Tests for the summary service, the HTTP API and logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.replay_header.schemas.schemas import Header, Player
from app.replay_header.src import core
from app.replay_header.src.extract_replay_header import build_header
from app.replay_header.src import header_api
from app.replay_header.src import summary_service


DUMP = {
    "Engine": 1,
    "Frames": 1000,
    "StartTime": "2023-03-04T18:30:00Z",
    "Title": "Friday league",
    "MapWidth": 128,
    "MapHeight": 96,
    "Speed": 6,
    "Type": "Top vs Bottom",
    "Host": "Alice",
    "Map": "Python",
    "Slots": [
        {"SlotID": 0, "Type": "Human", "Race": "P", "Team": 1, "Name": "Alice", "Color": "Red"},
        {"SlotID": 1, "Type": "Human", "Race": "T", "Team": 1, "Name": "Bob", "Color": "Blue"},
        {"SlotID": 2, "Type": "Computer", "Race": "Z", "Team": 2, "Name": "Carol", "Color": "Teal"},
        {"SlotID": 3, "Type": "Open", "Race": "Zerg", "Team": 0, "Name": ""},
    ],
}


def test_configure_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch):
    """Calling configure_logging multiple times does not add duplicate handlers."""
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        root.handlers.clear()
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        core.configure_logging()
        assert root.handlers

        before = len(root.handlers)
        core.configure_logging()
        assert len(root.handlers) == before
    finally:
        root.handlers[:] = saved


def test_summarize_header_lists_players_in_team_order():
    """The summary carries derived views and team-ordered players."""
    carol = Player(slot_id=2, race="Z", team=2, name="Carol")
    alice = Player(slot_id=0, race="P", team=1, name="Alice")
    header = Header(frames=1000, map_width=64, map_height=64, slots=[carol, alice], players=[carol, alice])

    summary = summary_service.summarize_header(header)
    assert summary.map_size == "64x64"
    assert summary.duration_seconds == pytest.approx(42.0)
    assert summary.duration == "00:42"
    assert summary.matchup == "PvZ"
    assert summary.player_names == "Alice VS Carol"
    assert [p.name for p in summary.players] == ["Alice", "Carol"]
    assert summary.players[0].race == "Protoss"


def test_format_summary_text_groups_by_team():
    """The text report lists each team under its own heading."""
    text = summary_service.format_summary_text(build_header(DUMP))
    assert "Map:       Python (128x96)" in text
    assert "Type:      Top vs Bottom" in text
    assert "Matchup:   PTvZ" in text
    assert "Players:   Alice, Bob VS Carol" in text
    assert text.index("Team 1:") < text.index("  Alice (Protoss, Red)") < text.index("Team 2:")
    assert text.endswith("  Carol (Zerg, Teal)\n")


def test_summary_endpoint_returns_summary():
    """Post a dump and receive its summary."""
    with TestClient(header_api.app) as client:
        resp = client.post("/header/summary", json=DUMP)

    assert resp.status_code == 200
    body = resp.json()
    assert body["matchup"] == "PTvZ"
    assert body["player_names"] == "Alice, Bob VS Carol"
    assert body["engine"] == "Brood War"
    assert body["duration"] == "00:42"
    assert len(body["players"]) == 3


def test_summary_endpoint_maps_bad_data_to_400():
    """Malformed dumps are client errors."""
    with TestClient(header_api.app) as client:
        resp = client.post("/header/summary", json={"Slots": [{"Race": "Nope"}]})

    assert resp.status_code == 400


def test_summary_endpoint_maps_non_dict_body_to_client_error():
    """A JSON body that is not an object is rejected before reaching the populator."""
    with TestClient(header_api.app) as client:
        resp = client.post("/header/summary", json=["not", "a", "dict"])

    assert resp.status_code == 422


def test_report_endpoint_returns_plain_text():
    """The report endpoint renders text."""
    with TestClient(header_api.app) as client:
        resp = client.post("/header/report", json=DUMP)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "Matchup:   PTvZ" in resp.text


def test_summary_file_endpoint(tmp_path: Path):
    """Summarize a dump file by path; a missing file is a 400."""
    path = tmp_path / "game.header.json"
    path.write_text(json.dumps(DUMP), encoding="utf-8")

    with TestClient(header_api.app) as client:
        ok = client.post("/header/summary/file", json={"header_path": str(path)})
        missing = client.post("/header/summary/file", json={"header_path": str(tmp_path / "nope")})

    assert ok.status_code == 200
    assert ok.json()["map_size"] == "128x96"
    assert missing.status_code == 400


def test_summary_file_endpoint_maps_unknown_errors_to_500(monkeypatch: pytest.MonkeyPatch):
    """Unexpected failures are server errors."""
    def boom(_path: str):
        raise RuntimeError("nope")

    monkeypatch.setattr(header_api.summary_service, "summarize_file", boom)

    with TestClient(header_api.app) as client:
        resp = client.post("/header/summary/file", json={"header_path": "dummy"})

    assert resp.status_code == 500


def test_upload_endpoint_summarizes_and_removes_temp_file(monkeypatch: pytest.MonkeyPatch):
    """The uploaded dump is summarized and its temporary file removed."""
    seen: list[str] = []
    real = summary_service.summarize_file

    def spy(path: str):
        seen.append(path)
        return real(path)

    monkeypatch.setattr(header_api.summary_service, "summarize_file", spy)

    with TestClient(header_api.app) as client:
        resp = client.post(
            "/header/summary/upload",
            files={"file": ("game.header.json", json.dumps(DUMP).encode("utf-8"), "application/json")},
        )

    assert resp.status_code == 200
    assert resp.json()["matchup"] == "PTvZ"
    assert seen and not Path(seen[0]).exists()


def test_upload_cleans_up_even_if_unlink_fails(monkeypatch: pytest.MonkeyPatch):
    """A failing unlink is logged and does not mask the response."""
    def unlink_raises(self: Path):
        raise OSError("locked")

    monkeypatch.setattr(header_api.Path, "unlink", unlink_raises, raising=True)

    with TestClient(header_api.app) as client:
        resp = client.post(
            "/header/summary/upload",
            files={"file": ("game.header.txt", b"['not a dict']", "text/plain")},
        )

    assert resp.status_code == 400


def test_health():
    """Health endpoint answers ok."""
    with TestClient(header_api.app) as client:
        assert client.get("/health").json() == {"status": "ok"}
