"""
Online clustering of log lines.

Lines are tokenized on spaces and assigned first-fit to clusters whose
founding line is within a token distance threshold.
"""

from .algorithm import (
    tokenize,
    score,
    distance,
    full_distance,
)
from .models import (
    Cluster,
    Snapshot,
    SnapshotLine,
    SNAPSHOT_SEPARATOR,
)
from .store import ClusterStore

__all__ = [
    # Algorithm
    "tokenize",
    "score",
    "distance",
    "full_distance",
    # Models
    "Cluster",
    "Snapshot",
    "SnapshotLine",
    "SNAPSHOT_SEPARATOR",
    # Store
    "ClusterStore",
]
