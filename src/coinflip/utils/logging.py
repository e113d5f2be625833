"""
Logging utilities with rich formatting.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Any, TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    MofNCompleteColumn,
)
from rich.panel import Panel

if TYPE_CHECKING:
    from ..mcts import SearchResult
    from ..play import MatchRecord, RoundRecord


console = Console()


class MatchLogger:
    """
    Match logger with rich output and JSON logging.

    Args:
        log_dir: Directory for JSONL files (no file is written if None)
        verbose: Whether to print to console
    """

    def __init__(self, log_dir: Optional[str] = None, verbose: bool = True):
        self.verbose = verbose
        self.log_file: Optional[Path] = None

        if log_dir is not None:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            self.log_file = path / f"match_{timestamp}.jsonl"

    def _write(self, record: dict) -> None:
        if self.log_file is None:
            return
        with open(self.log_file, "a") as f:
            f.write(json.dumps(record) + "\n")

    def log_round(self, record: RoundRecord) -> None:
        """Log one played round."""
        self._write({"type": "round", **record.to_dict()})

        if self.verbose:
            prob = (
                f"  (est. {record.win_probability * 100:.1f}%)"
                if record.win_probability is not None
                else ""
            )
            console.print(
                f"Round {record.round + 1}: [cyan]{record.caller}[/] calls "
                f"{record.call}, flip {record.outcome} -> "
                f"[bold]{record.winner}[/] wins round  "
                f"A {record.score_a} - {record.score_b} B{prob}"
            )

    def log_match(self, record: MatchRecord) -> None:
        """Log the final result of a match."""
        self._write({"type": "match", **record.summary()})

        if self.verbose:
            style = "yellow" if record.winner is None else "green"
            console.print(
                Panel(
                    f"Final score A {record.score_a} - {record.score_b} B\n"
                    f"[{style}]{record.winner_label}[/]",
                    title="Result",
                    border_style="blue",
                )
            )

    def log_message(self, message: str, style: str = "white") -> None:
        """Log a message."""
        if self.verbose:
            console.print(f"[{style}]{message}[/]")

    def log_info(self, message: str) -> None:
        """Log info message."""
        self.log_message(message, "blue")


def create_progress() -> Progress:
    """Create a rich progress bar with elapsed/remaining time."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TextColumn("eta"),
        TimeRemainingColumn(),
        console=console,
        transient=False,
    )


def print_config(config: Any) -> None:
    """Print configuration in a nice format."""
    table = Table(title="Configuration", show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    def add_dict(d: dict, prefix: str = "") -> None:
        for k, v in d.items():
            key = f"{prefix}{k}" if prefix else k
            if isinstance(v, dict):
                add_dict(v, f"{key}.")
            else:
                table.add_row(key, str(v))

    add_dict(asdict(config))
    console.print(table)


def print_search_result(result: SearchResult, title: str = "Search") -> None:
    """Print root child statistics and the decision."""
    if result.game_over:
        console.print("[yellow]Game over - no move to search[/]")
        return

    table = Table(title=title, show_header=True)
    table.add_column("Call", style="cyan")
    table.add_column("Visits", justify="right")
    table.add_column("Mean (A)", justify="right")
    table.add_column(f"Win% ({result.caller})", justify="right")

    for stats in result.child_stats.values():
        marker = " *" if stats.move == result.move else ""
        table.add_row(
            f"{stats.move}{marker}",
            str(stats.visits),
            f"{stats.mean_reward:.3f}",
            f"{stats.win_probability * 100:.1f}%",
        )

    console.print(table)
    console.print(
        f"[green]{result.caller} should call {result.move}[/] "
        f"({result.iterations} iterations, {result.num_nodes} nodes, "
        f"{result.elapsed:.3f}s{', time limit hit' if result.timed_out else ''})"
    )
