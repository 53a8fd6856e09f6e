"""
Snapshot renderers.

Uses rich for console output: counts are highlighted on a terminal and
written as plain `<count>, <text>` lines anywhere else.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .clustering import Snapshot, SNAPSHOT_SEPARATOR


COUNT_STYLE = "bold bright_red"
HEADER_STYLE = "bold bright_cyan"


def print_snapshot(console: Console, snapshot: Snapshot) -> None:
    """Print one `<count>, <text>` line per cluster."""
    if not console.is_terminal:
        # Files get the exact text format (no tab expansion or emoji codes)
        console.file.write(snapshot.to_text())
        return
    for line in snapshot:
        console.print(
            f"[{COUNT_STYLE}]{line.count}[/]{SNAPSHOT_SEPARATOR}{escape(line.text)}",
            highlight=False,
            soft_wrap=True,
            emoji=False,
        )


@dataclass
class RunHeader:
    """Execution info shown above each screen refresh."""

    input_name: str = "STDIN"
    refresh_interval: int = 0
    max_distance: float = 0.0
    max_lines: int = 0
    min_frequency: int = 0

    def rows(self) -> list[tuple[str, str]]:
        return [
            ("Input", self.input_name),
            ("Refresh interval", str(self.refresh_interval)),
            ("Max distance (clustering factor)", f"{self.max_distance:.2f}"),
            ("Output lines per screen", str(self.max_lines)),
            ("Min frequency displayed", str(self.min_frequency)),
        ]

    def print(self, console: Console) -> None:
        console.print(f"[{HEADER_STYLE}]=== Log Miner[/]", highlight=False)
        for label, value in self.rows():
            console.print(
                f"[{HEADER_STYLE}]=== {label}[/]: [{COUNT_STYLE}]{escape(value)}[/]",
                highlight=False,
            )
        console.print()


class StreamRenderer:
    """
    Writes snapshots to stdout or a file.

    With every=False only the latest snapshot is kept and it is written once,
    on close. With every=True each snapshot is written as it arrives,
    followed by a blank line.
    """

    def __init__(self, console: Console, every: bool = False):
        self.console = console
        self.every = every
        self.latest: Optional[Snapshot] = None

    def render(self, snapshot: Snapshot) -> None:
        self.latest = snapshot
        if self.every:
            print_snapshot(self.console, snapshot)
            self.console.print()

    def close(self) -> None:
        if not self.every and self.latest is not None:
            print_snapshot(self.console, self.latest)
        self.console.file.flush()


class ScreenRenderer:
    """Redraws the terminal with the run header and the latest snapshot."""

    def __init__(self, console: Console, header: RunHeader):
        self.console = console
        self.header = header

    def render(self, snapshot: Snapshot) -> None:
        self.console.clear()
        self.header.print(self.console)
        print_snapshot(self.console, snapshot)

    def close(self) -> None:
        self.console.file.flush()
