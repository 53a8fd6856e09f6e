"""
Cluster store: first-fit assignment and frequency ranking.
"""

from __future__ import annotations

from typing import Iterator

from .models import Cluster, Snapshot, SnapshotLine


def _by_count(cluster: Cluster) -> int:
    return cluster.count


class ClusterStore:
    """
    Ordered collection of clusters.

    Lines are assigned first-fit: the first cluster (in current order) within
    max_distance takes the line, otherwise a new cluster is appended. The
    result depends on input order.
    """

    def __init__(self, max_distance: float):
        if not 0.0 <= max_distance <= 1.0:
            raise ValueError(f"max_distance must be between 0.0 and 1.0, got {max_distance}")
        self.max_distance = max_distance
        self.clusters: list[Cluster] = []
        self.lines_seen = 0
        self.ranked = True  # clusters are in descending count order

    def __len__(self) -> int:
        return len(self.clusters)

    def __iter__(self) -> Iterator[Cluster]:
        return iter(self.clusters)

    def assign(self, line: str) -> Cluster:
        """Add a line to the first matching cluster, or found a new one."""
        self.lines_seen += 1
        self.ranked = False
        for cluster in self.clusters:
            if cluster.process(line):
                return cluster

        cluster = Cluster.from_line(line, self.max_distance)
        self.clusters.append(cluster)
        return cluster

    def rank(self) -> None:
        """Sort clusters by descending count. Ties keep their relative order."""
        self.clusters.sort(key=_by_count, reverse=True)
        self.ranked = True

    def snapshot(self, min_frequency: int, max_lines: int) -> Snapshot:
        """
        Ranked view of clusters with count >= min_frequency, at most max_lines
        entries. The store itself is not reordered.
        """
        if self.ranked:
            ranked = self.clusters
        else:
            ranked = sorted(self.clusters, key=_by_count, reverse=True)

        lines = []
        for cluster in ranked:
            if len(lines) >= max_lines or cluster.count < min_frequency:
                break
            lines.append(SnapshotLine(count=cluster.count, text=cluster.text))
        return Snapshot(lines=tuple(lines))

    def stats(self) -> dict:
        return {
            "lines": self.lines_seen,
            "clusters": len(self.clusters),
            "largest": max((c.count for c in self.clusters), default=0),
        }
