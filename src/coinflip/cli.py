"""
Command-line interface for coin-flip MCTS.

Commands:
- play: Play one or more matches
- search: Show the search statistics for a single position
- benchmark: Measure search speed
- show-config: Print (and optionally save) the effective configuration
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import typer
from rich.console import Console

from .errors import CoinFlipError, ConfigurationError

app = typer.Typer(
    name="cfm",
    help="Coin-flip MCTS - search and play heads-or-tails matches",
    no_args_is_help=True,
)

console = Console()


def _load_config(config_path: Optional[Path]):
    from .utils import Config

    if config_path is not None:
        if not config_path.exists():
            console.print(f"[red]Config file not found: {config_path}[/]")
            raise typer.Exit(code=1)
        return Config.load(str(config_path))
    return Config()


def _fail(error: CoinFlipError) -> None:
    console.print(f"[red]Error: {error}[/]")
    raise typer.Exit(code=1)


@app.command()
def play(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    rounds: Optional[int] = typer.Option(None, "--rounds", "-r", help="Rounds per match"),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", help="MCTS iterations per decision"
    ),
    exploration: Optional[float] = typer.Option(
        None, "--c", help="UCB1 exploration constant"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    caller_rule: Optional[str] = typer.Option(
        None, "--caller-rule", help="fixed (A always calls) or alternate"
    ),
    player_a: Optional[str] = typer.Option(None, "--player-a", help="mcts, heads, tails, random"),
    player_b: Optional[str] = typer.Option(None, "--player-b", help="mcts, heads, tails, random"),
    matches: Optional[int] = typer.Option(None, "--matches", "-m", help="Number of matches"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Write JSONL match logs here"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print the final results"),
) -> None:
    """Play matches between two callers."""
    from .game import CallerRule, random_outcome_source
    from .play import make_player, play_match, play_series
    from .utils import MatchLogger, create_progress, make_rng, print_config

    try:
        config = _load_config(config_path)

        # Command-line flags override the config file
        if rounds is not None:
            config.game.total_rounds = rounds
        if iterations is not None:
            config.mcts.iterations = iterations
        if exploration is not None:
            config.mcts.exploration_constant = exploration
        if seed is not None:
            config.seed = seed
        if caller_rule is not None:
            config.game.caller_rule = caller_rule
        if player_a is not None:
            config.match.player_a = player_a
        if player_b is not None:
            config.match.player_b = player_b
        if matches is not None:
            config.match.num_matches = matches
        if log_dir is not None:
            config.log_dir = str(log_dir)

        config.validate()
        config.ensure_dirs()
    except CoinFlipError as e:
        _fail(e)

    rng = make_rng(config.seed)
    # Independent streams: the real coin and each side's search
    coin_rng, a_rng, b_rng = rng.spawn(3)

    if not quiet:
        print_config(config)

    rule = CallerRule.parse(config.game.caller_rule)
    players = [
        make_player(
            kind,
            iterations=config.mcts.iterations,
            exploration_constant=config.mcts.exploration_constant,
            time_limit=config.mcts.time_limit,
            rng=player_rng,
        )
        for kind, player_rng in (
            (config.match.player_a, a_rng),
            (config.match.player_b, b_rng),
        )
    ]
    coin = random_outcome_source(coin_rng)

    if config.match.num_matches == 1:
        logger = MatchLogger(log_dir=config.log_dir, verbose=not quiet)
        logger.log_info(
            f"A ({config.match.player_a}) vs B ({config.match.player_b}), "
            f"{config.game.total_rounds} rounds, {rule.value} caller"
        )
        record = play_match(
            total_rounds=config.game.total_rounds,
            player_a=players[0],
            player_b=players[1],
            outcome_source=coin,
            caller_rule=rule,
            round_callback=logger.log_round,
        )
        logger.verbose = True
        logger.log_match(record)
        if logger.log_file is not None:
            logger.log_info(f"Match log written to {logger.log_file}")
        return

    with create_progress() as progress:
        task = progress.add_task("Matches", total=config.match.num_matches)

        def callback(n, record):
            progress.update(task, advance=1)

        result = play_series(
            num_matches=config.match.num_matches,
            total_rounds=config.game.total_rounds,
            player_a=players[0],
            player_b=players[1],
            outcome_source=coin,
            caller_rule=rule,
            progress_callback=callback,
        )

    if config.log_dir:
        logger = MatchLogger(log_dir=config.log_dir, verbose=False)
        for record in result.matches:
            for round_record in record.rounds:
                logger.log_round(round_record)
            logger.log_match(record)
        console.print(f"[blue]Match log written to {logger.log_file}[/]")

    console.print(f"\n[bold]Results (side A perspective):[/]")
    console.print(f"  A wins: {result.a_wins}")
    console.print(f"  B wins: {result.b_wins}")
    console.print(f"  Ties:   {result.ties}")
    console.print(f"  Score:  {result.score*100:.1f}%")


@app.command()
def search(
    rounds: int = typer.Option(10, "--rounds", "-r", help="Total rounds in the game"),
    round_index: int = typer.Option(0, "--round", help="Rounds already played"),
    score_a: Optional[int] = typer.Option(None, "--score-a", help="A's score so far"),
    score_b: Optional[int] = typer.Option(None, "--score-b", help="B's score so far"),
    iterations: int = typer.Option(1000, "--iterations", "-n", help="MCTS iterations"),
    exploration: float = typer.Option(1.4142135623730951, "--c", help="UCB1 exploration constant"),
    caller_rule: str = typer.Option("fixed", "--caller-rule", help="fixed or alternate"),
    seed: int = typer.Option(42, "--seed", "-s", help="Random seed"),
) -> None:
    """Search a single position and print the root statistics."""
    from .game import CallerRule, GameState, random_outcome_source, render
    from .mcts import MCTS
    from .utils import make_rng, print_search_result

    # Missing scores default to A having won every round so far
    if score_a is None:
        score_a = round_index - (score_b or 0)
    if score_b is None:
        score_b = round_index - score_a

    try:
        state = GameState(
            round=round_index,
            score_a=score_a,
            score_b=score_b,
            total_rounds=rounds,
            caller_rule=CallerRule.parse(caller_rule),
        )
        rng = make_rng(seed)
        mcts = MCTS(
            outcome_source=random_outcome_source(rng),
            exploration_constant=exploration,
            rng=rng,
            check_invariants=True,
        )
        console.print(render(state))
        result = mcts.search(state, iterations)
    except CoinFlipError as e:
        _fail(e)

    print_search_result(result)


@app.command()
def benchmark(
    rounds: int = typer.Option(10, "--rounds", "-r", help="Total rounds in the game"),
    iterations: int = typer.Option(1000, "--iterations", "-n", help="MCTS iterations"),
    repeats: int = typer.Option(5, "--repeats", help="Searches to time"),
    seed: int = typer.Option(42, "--seed", "-s", help="Random seed"),
) -> None:
    """Benchmark MCTS performance."""
    import time
    from .game import initial_state, random_outcome_source
    from .mcts import MCTS
    from .utils import make_rng

    try:
        state = initial_state(rounds)
        rng = make_rng(seed)
        mcts = MCTS(outcome_source=random_outcome_source(rng), rng=rng)
        if repeats < 1:
            raise ConfigurationError(f"repeats must be at least 1, got {repeats}")

        console.print(
            f"[cyan]Running {repeats} searches of {iterations} iterations "
            f"on a {rounds}-round game...[/]"
        )

        start = time.perf_counter()
        total_nodes = 0
        for i in range(repeats):
            result = mcts.search(state, iterations)
            total_nodes += result.num_nodes
            console.print(
                f"Search {i+1}: {result.move} "
                f"({result.win_probability*100:.1f}%, {result.num_nodes} nodes)"
            )
    except CoinFlipError as e:
        _fail(e)

    elapsed = max(time.perf_counter() - start, 1e-9)
    console.print(f"\n[green]Total time: {elapsed:.2f}s[/]")
    console.print(f"[green]Searches/sec: {repeats/elapsed:.2f}[/]")
    console.print(f"[green]Iterations/sec: {repeats*iterations/elapsed:.0f}[/]")
    console.print(f"[green]Avg nodes/search: {total_nodes/repeats:.0f}[/]")


@app.command("show-config")
def show_config(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    save: Optional[Path] = typer.Option(None, "--save", help="Write the config as YAML"),
) -> None:
    """Print the effective configuration."""
    from .utils import print_config

    try:
        config = _load_config(config_path).validate()
    except CoinFlipError as e:
        _fail(e)

    print_config(config)

    if save is not None:
        save.parent.mkdir(parents=True, exist_ok=True)
        config.save(str(save))
        console.print(f"[green]Saved config to {save}[/]")


if __name__ == "__main__":
    app()
