"""
Configuration management for coin-flip MCTS.

Uses dataclasses for clean configuration with sensible defaults.
Supports loading from YAML files.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import yaml

from ..errors import ConfigurationError
from ..game import CallerRule

PLAYER_KINDS = ("mcts", "heads", "tails", "random")


def _check_number(name: str, value, integer: bool = False) -> None:
    """Reject values YAML parsed as the wrong type (bools count as wrong)."""
    allowed = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, allowed):
        kind = "an integer" if integer else "a number"
        raise ConfigurationError(f"{name} must be {kind}, got {value!r}")


@dataclass
class MCTSConfig:
    """MCTS configuration."""

    iterations: int = 1000
    exploration_constant: float = math.sqrt(2)
    time_limit: Optional[float] = None  # Soft deadline per decision, seconds


@dataclass
class GameConfig:
    """Game rules."""

    total_rounds: int = 10
    caller_rule: str = "fixed"


@dataclass
class MatchConfig:
    """Who plays each side and how many matches."""

    player_a: str = "mcts"
    player_b: str = "mcts"
    num_matches: int = 1


@dataclass
class Config:
    """Full configuration."""

    # Component configs
    mcts: MCTSConfig = field(default_factory=MCTSConfig)
    game: GameConfig = field(default_factory=GameConfig)
    match: MatchConfig = field(default_factory=MatchConfig)

    # Random seed (None for a fresh one every run)
    seed: Optional[int] = 42

    # JSONL match logs are written here when set
    log_dir: Optional[str] = None

    def validate(self) -> Config:
        """Check every field, raising ConfigurationError on the first problem."""
        _check_number("mcts.iterations", self.mcts.iterations, integer=True)
        _check_number("mcts.exploration_constant", self.mcts.exploration_constant)
        if self.mcts.time_limit is not None:
            _check_number("mcts.time_limit", self.mcts.time_limit)
        _check_number("game.total_rounds", self.game.total_rounds, integer=True)
        _check_number("match.num_matches", self.match.num_matches, integer=True)
        if self.seed is not None:
            _check_number("seed", self.seed, integer=True)
        if self.log_dir is not None and not isinstance(self.log_dir, str):
            raise ConfigurationError(f"log_dir must be a path string, got {self.log_dir!r}")
        if self.mcts.iterations < 1:
            raise ConfigurationError(
                f"mcts.iterations must be at least 1, got {self.mcts.iterations}"
            )
        c = self.mcts.exploration_constant
        if not math.isfinite(c) or c < 0:
            raise ConfigurationError(
                f"mcts.exploration_constant must be finite and >= 0, got {c}"
            )
        if self.mcts.time_limit is not None and self.mcts.time_limit <= 0:
            raise ConfigurationError(
                f"mcts.time_limit must be positive, got {self.mcts.time_limit}"
            )
        if self.game.total_rounds < 1:
            raise ConfigurationError(
                f"game.total_rounds must be at least 1, got {self.game.total_rounds}"
            )
        CallerRule.parse(self.game.caller_rule)
        for name in ("player_a", "player_b"):
            kind = getattr(self.match, name)
            if kind not in PLAYER_KINDS:
                raise ConfigurationError(
                    f"match.{name} must be one of {', '.join(PLAYER_KINDS)}, got '{kind}'"
                )
        if self.match.num_matches < 1:
            raise ConfigurationError(
                f"match.num_matches must be at least 1, got {self.match.num_matches}"
            )
        return self

    def save(self, path: str) -> None:
        """Save config to YAML file."""
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> Config:
        """Load config from YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")

        # Parse nested configs
        try:
            return cls(
                mcts=MCTSConfig(**(data.get("mcts") or {})),
                game=GameConfig(**(data.get("game") or {})),
                match=MatchConfig(**(data.get("match") or {})),
                seed=data.get("seed", 42),
                log_dir=data.get("log_dir"),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid config in {path}: {e}") from e

    def ensure_dirs(self) -> None:
        """Create the log directory if one is configured."""
        if self.log_dir:
            Path(self.log_dir).mkdir(parents=True, exist_ok=True)


def get_default_config() -> Config:
    """Get default configuration: 10 rounds, 1000 iterations per decision."""
    return Config()
