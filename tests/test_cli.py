"""Tests for the command-line interface."""

import json

from typer.testing import CliRunner

from coinflip.cli import app
from coinflip.utils import Config

runner = CliRunner()


class TestPlay:
    def test_single_match(self):
        result = runner.invoke(
            app, ["play", "--rounds", "3", "--iterations", "20", "--seed", "1", "--quiet"]
        )
        assert result.exit_code == 0, result.output
        assert "Final score" in result.output

    def test_verbose_match_prints_rounds(self):
        result = runner.invoke(
            app, ["play", "--rounds", "2", "--iterations", "10", "--caller-rule", "alternate"]
        )
        assert result.exit_code == 0, result.output
        assert "Round 1" in result.output
        assert "Round 2" in result.output

    def test_series_with_logs(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "play", "--rounds", "2", "--iterations", "10", "--matches", "3",
                "--player-b", "random", "--log-dir", str(tmp_path), "--quiet",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "A wins:" in result.output

        logs = list(tmp_path.glob("match_*.jsonl"))
        assert len(logs) == 1
        entries = [json.loads(line) for line in logs[0].read_text().splitlines()]
        assert sum(e["type"] == "match" for e in entries) == 3
        assert sum(e["type"] == "round" for e in entries) == 6

    def test_config_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = Config()
        config.game.total_rounds = 2
        config.mcts.iterations = 5
        config.save(str(path))

        result = runner.invoke(app, ["play", "--config", str(path), "--quiet"])
        assert result.exit_code == 0, result.output

    def test_zero_iterations_fails(self):
        result = runner.invoke(app, ["play", "--iterations", "0"])
        assert result.exit_code == 1
        assert "iterations" in result.output

    def test_same_seed_same_match(self):
        args = ["play", "--rounds", "4", "--iterations", "30", "--seed", "7"]
        first = runner.invoke(app, args)
        second = runner.invoke(app, args)
        assert first.exit_code == 0, first.output
        assert "Round 4" in first.output
        assert first.output == second.output

    def test_missing_config_fails(self, tmp_path):
        result = runner.invoke(app, ["play", "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1

    def test_wrongly_typed_seed_fails(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("seed: abc\n")
        result = runner.invoke(app, ["play", "--config", str(path), "--quiet"])
        assert result.exit_code == 1
        assert "seed must be an integer" in result.output

    def test_wrongly_typed_rounds_fails(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("game:\n  total_rounds: three\n")
        result = runner.invoke(app, ["play", "--config", str(path)])
        assert result.exit_code == 1
        assert "total_rounds" in result.output


class TestSearch:
    def test_prints_decision(self):
        result = runner.invoke(app, ["search", "--rounds", "4", "--iterations", "50"])
        assert result.exit_code == 0, result.output
        assert "should call" in result.output

    def test_game_over_position(self):
        result = runner.invoke(
            app, ["search", "--rounds", "2", "--round", "2", "--iterations", "10"]
        )
        assert result.exit_code == 0, result.output
        assert "Game over" in result.output

    def test_inconsistent_scores_fail(self):
        result = runner.invoke(
            app,
            ["search", "--rounds", "3", "--round", "1", "--score-a", "1", "--score-b", "1"],
        )
        assert result.exit_code == 1


class TestBenchmark:
    def test_runs(self):
        result = runner.invoke(
            app, ["benchmark", "--rounds", "3", "--iterations", "10", "--repeats", "2"]
        )
        assert result.exit_code == 0, result.output
        assert "Iterations/sec" in result.output

    def test_zero_repeats_fails(self):
        result = runner.invoke(app, ["benchmark", "--repeats", "0"])
        assert result.exit_code == 1

    def test_frozen_clock(self, monkeypatch):
        monkeypatch.setattr("time.perf_counter", lambda: 100.0)
        result = runner.invoke(
            app, ["benchmark", "--rounds", "2", "--iterations", "5", "--repeats", "1"]
        )
        assert result.exit_code == 0, result.output
        assert "Iterations/sec" in result.output


class TestShowConfig:
    def test_save(self, tmp_path):
        path = tmp_path / "out" / "config.yaml"
        result = runner.invoke(app, ["show-config", "--save", str(path)])
        assert result.exit_code == 0, result.output
        assert Config.load(str(path)) == Config()
