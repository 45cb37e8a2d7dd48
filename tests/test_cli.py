import json
import logging

import pytest
from click.testing import CliRunner

from muscle_recovery import cli
from muscle_recovery.cli import main
from muscle_recovery.logging import JSONFormatter, TextFormatter
from muscle_recovery.session_models import WorkoutSessionRecord

NOW = "2026-03-10T12:00:00+00:00"


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def _write_sessions(tmp_path, sessions):
    path = tmp_path / "sessions.json"
    path.write_text(json.dumps(sessions))
    return path


class StubSource:
    """Stands in for PostgresRecoveryDataSource inside the CLI."""

    fail = False
    instances: list["StubSource"] = []

    def __init__(self, config):
        self.config = config
        self.calls: list[tuple[str, str]] = []
        StubSource.instances.append(self)

    async def fetch_profile(self, user_id):
        return {"id": user_id}

    async def fetch_sessions(self, user_id, cutoff):
        self.calls.append((user_id, cutoff.isoformat()))
        if self.fail:
            raise ConnectionError("database unavailable")
        return [
            WorkoutSessionRecord.model_validate({
                "date": "2026-03-10T09:00:00+00:00",
                "exercises": [{"primary_muscle": "Quads", "sets": [{"weight": 100}] * 6}],
            })
        ]


class TestComputeCommand:
    def test_outputs_snapshot_overview_and_body_map(self, tmp_path):
        path = _write_sessions(tmp_path, [
            {
                "date": "2026-03-10T07:00:00+00:00",
                "exercises": [
                    {"primary_muscle": "Chest", "secondary_muscles": ["triceps"],
                     "sets": [{"weight": 60}, {"weight": 60}, {"weight": 60}, {"weight": 60}]},
                ],
            },
        ])
        result = CliRunner().invoke(main, ["compute", str(path), "--now", NOW, "--compact"])
        assert result.exit_code == 0, result.output

        payload = json.loads(result.output)
        muscles = {m["muscle_group"]: m for m in payload["muscles"]}
        assert muscles["Chest"]["status"] == "not_recovered"
        assert muscles["Chest"]["intensity"] == "moderate"  # 4 * 1.5 = 6
        assert muscles["Chest"]["last_worked"] == "5 hours ago"
        assert muscles["Triceps"]["intensity"] == "light"  # 2 * 1.5 = 3
        assert muscles["Calves"]["label"] == "No Data"
        assert muscles["Calves"]["gradient_step"] == 6
        assert payload["overview"] == {
            "days_since_last_workout": 0,
            "fresh_muscle_groups": 11,
            "total_muscle_groups": 13,
        }
        assert len(payload["body_map"]) == 17
        assert {"slug": "upper-back", "name": "Upper Back", "intensity": 6} in payload["body_map"]

    def test_empty_file(self, tmp_path):
        path = _write_sessions(tmp_path, [])
        result = CliRunner().invoke(main, ["compute", str(path), "--now", NOW])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["last_workout_date"] is None
        assert payload["overview"]["days_since_last_workout"] is None

    def test_invalid_records(self, tmp_path):
        path = _write_sessions(tmp_path, [{"exercises": []}])
        result = CliRunner().invoke(main, ["compute", str(path)])
        assert result.exit_code == 2
        assert "Invalid session records" in result.output

    def test_invalid_now(self, tmp_path):
        path = _write_sessions(tmp_path, [])
        result = CliRunner().invoke(main, ["compute", str(path), "--now", "yesterday"])
        assert result.exit_code == 2


class TestSnapshotCommand:
    def test_requires_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        result = CliRunner().invoke(main, ["snapshot", "--user-id", "user-1"])
        assert result.exit_code == 1
        assert "DATABASE_URL must be set" in result.output

    def test_loads_and_prints_recovery(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://app@db/runtime")
        monkeypatch.setattr(cli, "PostgresRecoveryDataSource", StubSource)
        monkeypatch.setattr(StubSource, "fail", False)

        result = CliRunner().invoke(
            main, ["--log-format", "json", "snapshot", "--user-id", "user-1", "--now", NOW, "--compact"]
        )
        assert result.exit_code == 0, result.output

        payload = json.loads(result.stdout)
        muscles = {m["muscle_group"]: m for m in payload["muscles"]}
        assert muscles["Quads"]["status"] == "not_recovered"
        assert muscles["Quads"]["intensity"] == "heavy"  # 6 * 1.5 = 9
        assert payload["last_workout_date"] == "2026-03-10T09:00:00+00:00"
        assert StubSource.instances[-1].calls == [("user-1", "2026-03-03T12:00:00+00:00")]

        log_entry = json.loads(result.stderr.strip().splitlines()[-1])
        assert log_entry["context"]["user_id"] == "user-1"

    def test_fetch_failure_exits_nonzero(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://app@db/runtime")
        monkeypatch.setattr(cli, "PostgresRecoveryDataSource", StubSource)
        monkeypatch.setattr(StubSource, "fail", True)

        result = CliRunner().invoke(main, ["snapshot", "--user-id", "user-1", "--now", NOW])
        assert result.exit_code == 1
        assert "Failed to load recovery data: database unavailable" in result.output


class TestLogFormatOption:
    def test_defaults_to_json(self, monkeypatch, tmp_path):
        monkeypatch.delenv("RECOVERY_LOG_FORMAT", raising=False)
        path = _write_sessions(tmp_path, [])
        assert CliRunner().invoke(main, ["compute", str(path)]).exit_code == 0
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_env_var_selects_text(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RECOVERY_LOG_FORMAT", "text")
        path = _write_sessions(tmp_path, [])
        assert CliRunner().invoke(main, ["compute", str(path)]).exit_code == 0
        assert isinstance(logging.getLogger().handlers[0].formatter, TextFormatter)

    def test_option_overrides_env_var(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RECOVERY_LOG_FORMAT", "text")
        path = _write_sessions(tmp_path, [])
        result = CliRunner().invoke(main, ["--log-format", "json", "compute", str(path)])
        assert result.exit_code == 0
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_unknown_env_value_rejected(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RECOVERY_LOG_FORMAT", "xml")
        path = _write_sessions(tmp_path, [])
        result = CliRunner().invoke(main, ["compute", str(path)])
        assert result.exit_code == 2
