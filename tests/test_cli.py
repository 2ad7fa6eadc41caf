"""Tests for the bashgate CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from bashgate import __version__
from bashgate.cli.commands import app

runner = CliRunner(env={"COLUMNS": "200"})


@pytest.fixture
def quiet_config(tmp_path: Path) -> Path:
    """Config that keeps logs off stderr so stdout holds only the response."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logging": {"level": "ERROR"}}))
    return path


@pytest.fixture
def bad_rules_config(tmp_path: Path) -> Path:
    rules = tmp_path / "rules.json"
    rules.write_text(json.dumps({"risky": [{"name": "bad", "pattern": "(", "reason": "bad"}]}))
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"rules": {"file": str(rules)}, "logging": {"level": "ERROR"}}))
    return path


def _hook_input(command: str) -> str:
    return json.dumps({"tool_name": "Bash", "tool_input": {"command": command}})


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"bashgate v{__version__}" in result.output


class TestHookCommand:
    def test_deny(self, quiet_config: Path):
        result = runner.invoke(app, ["hook", "--config", str(quiet_config)],
                               input=_hook_input("git reset --hard"))
        assert result.exit_code == 0
        output = json.loads(result.stdout)["hookSpecificOutput"]
        assert output["permissionDecision"] == "deny"

    def test_allow_is_silent(self, quiet_config: Path):
        result = runner.invoke(app, ["hook", "--config", str(quiet_config)],
                               input=_hook_input("git status"))
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_malformed_input_allows(self, quiet_config: Path):
        result = runner.invoke(app, ["hook", "--config", str(quiet_config)], input="{oops")
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_invalid_env_setting_still_serves(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BASHGATE_LOGGING__LEVEL", "bogus")
        config = tmp_path / "config.json"
        result = runner.invoke(app, ["hook", "--config", str(config)], input=_hook_input("git status"))
        assert result.exit_code == 0
        assert result.stdout == ""

        result = runner.invoke(app, ["check", "git reset --hard", "--config", str(config)])
        assert result.exit_code == 0
        assert "DENY" in result.output

    def test_unreadable_config_still_serves(self, tmp_path: Path):
        result = runner.invoke(app, ["hook", "--config", str(tmp_path)], input=_hook_input("git status"))
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_invalid_rules_fail_at_startup(self, bad_rules_config: Path):
        result = runner.invoke(app, ["hook", "--config", str(bad_rules_config)],
                               input=_hook_input("ls"))
        assert result.exit_code == 1


class TestCheckCommand:
    def test_deny(self, quiet_config: Path):
        result = runner.invoke(app, ["check", "git reset --hard", "--config", str(quiet_config)])
        assert result.exit_code == 0
        assert "DENY" in result.output
        assert "git-reset-hard" in result.output

    def test_allow_shows_normalized(self, quiet_config: Path):
        result = runner.invoke(app, ["check", "/bin/rm -rf /tmp/ok", "--config", str(quiet_config)])
        assert result.exit_code == 0
        assert "ALLOW" in result.output
        assert "normalized: rm -rf /tmp/ok" in result.output


class TestRulesCommands:
    def test_list_filtered(self, quiet_config: Path):
        result = runner.invoke(app, ["rules", "list", "--tier", "dangerous", "--config", str(quiet_config)])
        assert result.exit_code == 0
        assert "git-stash-clear" in result.output
        assert "rm-temp-paths" not in result.output

    def test_list_unknown_tier(self, quiet_config: Path):
        result = runner.invoke(app, ["rules", "list", "--tier", "blocked", "--config", str(quiet_config)])
        assert result.exit_code == 1

    def test_validate_defaults(self, quiet_config: Path):
        result = runner.invoke(app, ["rules", "validate", "--config", str(quiet_config)])
        assert result.exit_code == 0
        assert "rules OK" in result.output

    def test_validate_bad_file(self, tmp_path: Path, quiet_config: Path):
        rules = tmp_path / "rules.json"
        rules.write_text(json.dumps({"safe": [{"name": "x", "pattern": "[", "reason": "x"}]}))
        result = runner.invoke(app, ["rules", "validate", str(rules), "--config", str(quiet_config)])
        assert result.exit_code == 1

    def test_export_roundtrips_through_validate(self, tmp_path: Path, quiet_config: Path):
        out = tmp_path / "exported.json"
        result = runner.invoke(app, ["rules", "export", str(out)])
        assert result.exit_code == 0
        data = json.loads(out.read_text())
        assert {"safe", "dangerous", "risky"} <= data.keys()

        config = tmp_path / "only-exported.json"
        config.write_text(json.dumps({"rules": {"includeDefaults": False}, "logging": {"level": "ERROR"}}))
        result = runner.invoke(app, ["rules", "validate", str(out), "--config", str(config)])
        assert result.exit_code == 0


class TestConfigCommands:
    def test_init_and_refuse_overwrite(self, tmp_path: Path):
        path = tmp_path / "config.json"
        result = runner.invoke(app, ["config", "init", "--config", str(path)])
        assert result.exit_code == 0
        assert path.exists()

        result = runner.invoke(app, ["config", "init", "--config", str(path)])
        assert result.exit_code == 1

        result = runner.invoke(app, ["config", "init", "--config", str(path), "--force"])
        assert result.exit_code == 0

    def test_show(self, quiet_config: Path):
        result = runner.invoke(app, ["config", "show", "--config", str(quiet_config)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["logging"]["level"] == "ERROR"


class TestSnippet:
    def test_snippet(self):
        result = runner.invoke(app, ["snippet"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["hooks"]["PreToolUse"][0]["matcher"] == "Bash"
