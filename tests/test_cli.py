"""Tests for CLI."""

import json

import pytest
from click.testing import CliRunner

from sidejack.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Sidejack" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_signatures(self, runner):
        result = runner.invoke(cli, ["signatures"])
        assert result.exit_code == 0
        assert "Facebook" in result.output

    def test_sessionize(self, runner):
        result = runner.invoke(cli, [
            "sessionize", "--host", "www.facebook.com", "--cookie", "xs=2; c_user=1; datr=3",
        ])
        assert result.exit_code == 0
        assert "c_user=1; xs=2" in result.output

    def test_sessionize_unrecognized(self, runner):
        result = runner.invoke(cli, ["sessionize", "--host", "example.org", "--cookie", "a=1"])
        assert result.exit_code == 0
        assert "No session recognized" in result.output

    def test_replay(self, runner, tmp_path):
        path = tmp_path / "sightings.jsonl"
        records = [
            {"uid": "C1", "client_address": "10.0.0.1", "host": "www.facebook.com",
             "cookie": "c_user=1; xs=2", "user_agent": "AgentX", "timestamp": 1000.0},
            {"uid": "C2", "client_address": "10.0.0.2", "host": "www.facebook.com",
             "cookie": "c_user=1; xs=2", "user_agent": "AgentY", "timestamp": 1060.0},
        ]
        path.write_text("\n".join(json.dumps(r) for r in records) + "\n")
        result = runner.invoke(cli, ["replay", str(path)])
        assert result.exit_code == 0
        assert "Replayed 2 sightings" in result.output
        assert "cookie_hijack" in result.output

    def test_replay_bad_json(self, runner, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text("{not json\n")
        result = runner.invoke(cli, ["replay", str(path)])
        assert result.exit_code != 0

    def test_replay_non_object_line(self, runner, tmp_path):
        path = tmp_path / "scalars.jsonl"
        path.write_text("3\n")
        result = runner.invoke(cli, ["replay", str(path)])
        assert result.exit_code != 0
        assert "line 1: expected a JSON object" in result.output

    def test_replay_bad_timestamp(self, runner, tmp_path):
        path = tmp_path / "ts.jsonl"
        rec = {"client_address": "10.0.0.1", "host": "www.facebook.com",
               "cookie": "c_user=1; xs=a", "timestamp": "noon"}
        path.write_text(json.dumps(rec) + "\n")
        result = runner.invoke(cli, ["replay", str(path)])
        assert result.exit_code != 0
        assert "timestamp must be a number" in result.output

    def test_replay_bad_config(self, runner, tmp_path):
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("bogus_option: 1\n")
        data = tmp_path / "s.jsonl"
        data.write_text("")
        result = runner.invoke(cli, ["replay", str(data), "--config", str(cfg)])
        assert result.exit_code != 0

    def test_simulate(self, runner):
        result = runner.invoke(cli, ["simulate", "--sessions", "5", "--sightings", "100", "--hijack-rate", "0.1"])
        assert result.exit_code == 0
        assert "Simulation Results" in result.output

    def test_demo(self, runner):
        result = runner.invoke(cli, ["demo"])
        assert result.exit_code == 0
        assert "-> reuse" in result.output
        assert "-> hijack" in result.output
        assert "-> roam" in result.output
        assert "-> ignore" in result.output
        assert "Demo complete" in result.output
