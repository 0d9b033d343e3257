"""Tests for CLI commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from paliers.cli import app

runner = CliRunner()


def invoke_json(*args: str) -> tuple[int, dict]:
    result = runner.invoke(app, [*args, "--json"])
    return result.exit_code, json.loads(result.output)


def run_setup() -> None:
    result = runner.invoke(
        app,
        [
            "setup",
            "--start-date", "2024-01-01",
            "--start-weight", "85",
            "--goal-weight", "70",
        ],
    )
    assert result.exit_code == 0, result.output


class TestMainCommands:
    """Tests for help and argument checks."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "palier" in result.output.lower()

    def test_setup_requires_options(self, cli_db):
        result = runner.invoke(app, ["setup"])
        assert result.exit_code != 0

    def test_weight_add_requires_weight(self, cli_db):
        result = runner.invoke(app, ["weight", "add"])
        assert result.exit_code != 0


class TestSetupCommand:
    """Tests for the setup command."""

    def test_setup_json(self, cli_db):
        code, data = invoke_json(
            "setup",
            "--start-date", "2024-01-01",
            "--start-weight", "85",
            "--goal-weight", "70",
            "--palier-step", "2.5",
        )
        assert code == 0
        assert data["success"] is True
        assert data["data"]["palier_step"] == 2.5

    def test_setup_twice_requires_edit(self, cli_db):
        run_setup()
        code, data = invoke_json(
            "setup", "--start-date", "2024-01-01", "--start-weight", "90", "--goal-weight", "70"
        )
        assert code == 1
        assert data["success"] is False

        code, data = invoke_json(
            "setup", "--start-date", "2024-01-01", "--start-weight", "90",
            "--goal-weight", "75", "--edit",
        )
        assert code == 0
        assert data["data"]["goal_weight"] == 75.0

    def test_invalid_setup(self, cli_db):
        code, data = invoke_json(
            "setup", "--start-date", "2024-01-01", "--start-weight", "0", "--goal-weight", "70"
        )
        assert code == 1
        assert "positive" in data["errors"][0]


class TestWeightCommands:
    """Tests for weight add/list and dictate."""

    def test_add_before_setup_fails(self, cli_db):
        code, data = invoke_json("weight", "add", "80", "--date", "2024-01-05")
        assert code == 1
        assert data["success"] is False

    def test_add_and_celebrate(self, cli_db):
        run_setup()
        code, data = invoke_json("weight", "add", "82", "--date", "2024-01-05")
        assert code == 0
        assert data["data"]["level_delta"] == 1

        code, data = invoke_json("weight", "add", "79.5", "--date", "2024-01-10")
        assert data["data"]["previous_weight"] == 82.0
        assert data["data"]["celebrate"] is True
        assert data["data"]["palier_level"] == 2

    def test_add_human_output(self, cli_db):
        run_setup()
        result = runner.invoke(app, ["weight", "add", "79.5", "--date", "2024-01-10"])
        assert result.exit_code == 0
        assert "Bravo" in result.output

    def test_invalid_date(self, cli_db):
        run_setup()
        code, data = invoke_json("weight", "add", "80", "--date", "10/01/2024")
        assert code == 1

    def test_list_sorted(self, cli_db):
        run_setup()
        runner.invoke(app, ["weight", "add", "80", "--date", "2024-01-10"])
        runner.invoke(app, ["weight", "add", "82", "--date", "2024-01-05"])

        code, data = invoke_json("weight", "list")
        assert code == 0
        assert [e["date"] for e in data["data"]["entries"]] == [
            "2024-01-01",
            "2024-01-05",
            "2024-01-10",
        ]

    def test_list_empty(self, cli_db):
        code, data = invoke_json("weight", "list")
        assert code == 0
        assert data["command"] == "weight list"
        assert data["data"]["entries"] == []

    def test_dictate(self, cli_db):
        run_setup()
        code, data = invoke_json("dictate", "80,5 kg", "--date", "2024-01-08")
        assert code == 0
        assert data["data"]["weight"] == 80.5

    def test_dictate_no_digits(self, cli_db):
        run_setup()
        code, data = invoke_json("dictate", "quatre vingt virgule cinq", "--date", "2024-01-08")
        assert code == 1
        assert "Aucun poids" in data["errors"][0]


class TestViewCommands:
    """Tests for progress and chart."""

    def test_progress_empty(self, cli_db):
        code, data = invoke_json("progress")
        assert code == 1

    def test_progress(self, cli_db):
        run_setup()
        runner.invoke(app, ["weight", "add", "78.2", "--date", "2024-01-20"])

        code, data = invoke_json("progress")
        assert code == 0
        assert data["data"]["next_palier"]["target_weight"] == 75.0
        assert data["data"]["next_palier"]["remaining"] == 3.2

    def test_chart_empty(self, cli_db):
        code, data = invoke_json("chart")
        assert code == 0
        assert data["data"] is None

    def test_chart(self, cli_db):
        run_setup()
        runner.invoke(app, ["weight", "add", "73", "--date", "2024-01-20"])

        code, data = invoke_json("chart")
        assert code == 0
        assert data["data"]["y_min"] == 69.0
        assert data["data"]["y_max"] == 89.0
        assert [s["kind"] for s in data["data"]["series"]] == ["weight", "goal", "palier", "palier"]

    def test_chart_table(self, cli_db):
        run_setup()
        result = runner.invoke(app, ["chart"])
        assert result.exit_code == 0


class TestBackupCommands:
    """Tests for export/import, step and theme."""

    def test_export_import_roundtrip(self, cli_db, tmp_path):
        run_setup()
        runner.invoke(app, ["weight", "add", "79", "--date", "2024-01-10"])
        backup = tmp_path / "sauvegarde-poids.json"

        code, data = invoke_json("export", str(backup))
        assert code == 0
        payload = json.loads(backup.read_text())
        assert len(payload["entries"]) == 2

        code, data = invoke_json("import", str(backup))
        assert code == 0
        assert data["data"]["entries"] == 2
        assert data["data"]["palier_level"] == 2

    def test_import_invalid_keeps_data(self, cli_db, tmp_path):
        run_setup()
        bad = tmp_path / "bad.json"
        bad.write_text('{"startWeight": 100}')

        code, data = invoke_json("import", str(bad))
        assert code == 1

        code, data = invoke_json("weight", "list")
        assert len(data["data"]["entries"]) == 1

    def test_import_over_corrupt_save(self, cli_db, tmp_path):
        """A valid backup restores data even when the local save is unreadable."""
        with cli_db.get_connection() as conn:
            conn.execute(
                "INSERT INTO app_state (key, payload) VALUES (?, ?)",
                ("weightTrackerData", "{broken"),
            )

        code, data = invoke_json("weight", "list")
        assert code == 1
        assert data["suggestions"] == ["Restore a backup with: paliers import <file>"]

        backup = tmp_path / "sauvegarde-poids.json"
        backup.write_text(json.dumps({
            "startDate": "2024-01-01",
            "startWeight": 85,
            "goalWeight": 70,
            "entries": [{"date": "2024-01-01", "weight": 85}],
        }))
        code, data = invoke_json("import", str(backup))
        assert code == 0
        assert data["data"]["configured"] is True

        code, data = invoke_json("weight", "list")
        assert code == 0
        assert data["data"]["entries"] == [{"date": "2024-01-01", "weight": 85.0}]

    def test_export_unwritable_path(self, cli_db, tmp_path):
        run_setup()
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        code, data = invoke_json("export", str(blocker / "backup.json"))
        assert code == 1
        assert data["success"] is False
        assert data["command"] == "export"

    def test_step_and_theme(self, cli_db):
        run_setup()
        code, data = invoke_json("step", "2")
        assert code == 0
        assert data["data"]["palier_step"] == 2.0

        code, data = invoke_json("theme", "dark")
        assert code == 0

        code, data = invoke_json("theme", "blue")
        assert code == 1
