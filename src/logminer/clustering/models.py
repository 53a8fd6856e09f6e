"""
Data models for log line clustering.

Defines clusters and the immutable snapshots published from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .algorithm import TOKEN_SEPARATOR, distance, tokenize


# Separator between count and representative in a snapshot line
SNAPSHOT_SEPARATOR = ", "


@dataclass
class Cluster:
    """A representative token sequence plus the number of lines matched to it."""

    representative: tuple[str, ...]  # Tokens of the founding line, never updated
    max_distance: float              # Lines closer than this join the cluster
    count: int = 1                   # Founding line included

    @classmethod
    def from_line(cls, line: str, max_distance: float) -> Cluster:
        """Create a cluster founded by a line."""
        return cls(representative=tuple(tokenize(line)), max_distance=max_distance)

    @property
    def text(self) -> str:
        return TOKEN_SEPARATOR.join(self.representative)

    def distance_to(self, tokens: list[str]) -> float:
        return distance(self.representative, tokens, self.max_distance)

    def process(self, line: str) -> bool:
        """
        Match a line against this cluster.

        If the line is within max_distance of the representative the count is
        incremented and True is returned. Otherwise nothing changes.
        """
        if self.distance_to(tokenize(line)) < self.max_distance:
            self.count += 1
            return True
        return False

    def __str__(self) -> str:
        return f"{self.count}{SNAPSHOT_SEPARATOR}{self.text}"


@dataclass(frozen=True)
class SnapshotLine:
    """One reported cluster: match count and representative text."""

    count: int
    text: str

    def __str__(self) -> str:
        return f"{self.count}{SNAPSHOT_SEPARATOR}{self.text}"

    @classmethod
    def parse(cls, line: str) -> SnapshotLine:
        """Parse a `<count>, <text>` line."""
        count, sep, text = line.partition(SNAPSHOT_SEPARATOR)
        if not sep or not count.isdigit():
            raise ValueError(f"Not a snapshot line: {line!r}")
        return cls(count=int(count), text=text)


@dataclass(frozen=True)
class Snapshot:
    """Ranked, filtered view of a cluster store at a point in time."""

    lines: tuple[SnapshotLine, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def to_text(self) -> str:
        """Render as one `<count>, <text>` line per cluster."""
        return "".join(f"{line}\n" for line in self.lines)

    def to_dict(self) -> dict:
        return {"lines": [{"count": l.count, "text": l.text} for l in self.lines]}

    @classmethod
    def parse(cls, text: str) -> Snapshot:
        """Recover a snapshot from its text form."""
        return cls(lines=tuple(SnapshotLine.parse(l) for l in text.splitlines() if l))
