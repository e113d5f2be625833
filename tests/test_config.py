"""Tests for configuration loading and validation."""

import math

import pytest
import yaml

from coinflip.errors import ConfigurationError
from coinflip.utils import Config, get_default_config


class TestDefaults:
    def test_default_values(self):
        config = get_default_config()
        assert config.game.total_rounds == 10
        assert config.mcts.iterations == 1000
        assert config.mcts.exploration_constant == pytest.approx(math.sqrt(2))
        assert config.game.caller_rule == "fixed"
        assert config.seed == 42
        assert config.log_dir is None

    def test_defaults_validate(self):
        assert get_default_config().validate() is not None


class TestYaml:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = Config()
        config.game.total_rounds = 3
        config.game.caller_rule = "alternate"
        config.mcts.iterations = 50
        config.mcts.time_limit = 0.5
        config.match.player_b = "random"
        config.seed = None
        config.save(str(path))

        loaded = Config.load(str(path))
        assert loaded == config

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"game": {"total_rounds": 4}}))

        loaded = Config.load(str(path))
        assert loaded.game.total_rounds == 4
        assert loaded.mcts.iterations == 1000
        assert loaded.seed == 42

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.load(str(path)) == Config()

    def test_unknown_key_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"mcts": {"simulations": 10}}))
        with pytest.raises(ConfigurationError):
            Config.load(str(path))

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("mcts: [unclosed")
        with pytest.raises(ConfigurationError):
            Config.load(str(path))

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            Config.load(str(path))

    def test_ensure_dirs(self, tmp_path):
        config = Config(log_dir=str(tmp_path / "logs" / "nested"))
        config.ensure_dirs()
        assert (tmp_path / "logs" / "nested").is_dir()


class TestValidate:
    @pytest.mark.parametrize(
        "section, name, value",
        [
            ("mcts", "iterations", 0),
            ("mcts", "iterations", -3),
            ("mcts", "exploration_constant", -0.1),
            ("mcts", "exploration_constant", float("inf")),
            ("mcts", "time_limit", 0.0),
            ("game", "total_rounds", 0),
            ("game", "caller_rule", "sometimes"),
            ("match", "player_a", "oracle"),
            ("match", "num_matches", 0),
        ],
    )
    def test_invalid_values(self, section, name, value):
        config = Config()
        setattr(getattr(config, section), name, value)
        with pytest.raises(ConfigurationError):
            config.validate()

    @pytest.mark.parametrize(
        "section, name, value",
        [
            ("mcts", "iterations", "many"),
            ("mcts", "iterations", 2.5),
            ("mcts", "iterations", True),
            ("mcts", "exploration_constant", "wide"),
            ("mcts", "time_limit", "soon"),
            ("game", "total_rounds", "three"),
            ("match", "num_matches", None),
        ],
    )
    def test_wrong_types(self, section, name, value):
        config = Config()
        setattr(getattr(config, section), name, value)
        with pytest.raises(ConfigurationError):
            config.validate()

    @pytest.mark.parametrize("seed", ["abc", 1.5, False])
    def test_seed_must_be_int_or_none(self, seed):
        config = Config(seed=seed)
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_seed_none_allowed(self):
        Config(seed=None).validate()

    def test_log_dir_must_be_string(self):
        with pytest.raises(ConfigurationError):
            Config(log_dir=7).validate()

    def test_loaded_string_rounds_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"game": {"total_rounds": "three"}}))
        config = Config.load(str(path))
        with pytest.raises(ConfigurationError, match="total_rounds"):
            config.validate()
