"""Tests for the command-line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from neuro_primitives import main as cli

MOCK_DATA = Path(__file__).resolve().parent.parent / "mock_data.json"
AT = "2025-01-18T10:00:00Z"


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    """Keep log output off stdout so JSON stays parseable."""
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)


class TestEstimateCommand:
    def test_json_output(self, capsys):
        with capture_logs() as logs:
            cli.main(["estimate", "--events", str(MOCK_DATA), "--at", AT, "--json"])
        result = json.loads(capsys.readouterr().out)
        assert set(result["primitives"]) >= {"dopamine", "cortisol", "glucose"}
        assert result["functional_state"]["state_type"]
        assert any(entry["event"] == "cli.estimate" and entry["user"] == "user_001" for entry in logs)

    def test_text_report(self, capsys):
        with capture_logs():
            cli.main(["estimate", "--events", str(MOCK_DATA), "--at", AT])
        out = capsys.readouterr().out
        assert "NEUROBIOLOGICAL PRIMITIVE ESTIMATION RESULTS" in out
        assert "PHYSIOLOGICAL VALIDATION ADJUSTMENTS" in out
        assert "SLEEP DRIVE (Two-Process Model)" in out
        assert "Recommendations:" in out

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["estimate", "--events", str(tmp_path / "nope.json")])
        assert excinfo.value.code == 2
        assert "error: cannot read" in capsys.readouterr().err

    def test_invalid_file(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text('{"events": []}', encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["estimate", "--events", str(bad)])
        assert excinfo.value.code == 2
        assert "invalid event file" in capsys.readouterr().err

    def test_invalid_timestamp(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["estimate", "--events", str(MOCK_DATA), "--at", "yesterday"])
        assert excinfo.value.code == 2
        assert "invalid --at timestamp" in capsys.readouterr().err


class TestOtherCommands:
    def test_profiles(self, capsys):
        cli.main(["profiles"])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 5
        assert lines[0].startswith("healthy")

    def test_serve(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(cli.uvicorn, "run", lambda target, **kwargs: calls.update(target=target, **kwargs))
        cli.main(["serve", "--port", "9001"])
        assert calls["target"] == "neuro_primitives.api.server:app"
        assert calls["port"] == 9001
        assert calls["reload"] is False

    def test_no_command(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 1
