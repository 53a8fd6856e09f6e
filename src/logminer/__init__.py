"""
Log Miner - online clustering of log lines.

Groups near-duplicate lines as they stream in and reports the most
frequent patterns.
"""

from .clustering import ClusterStore, Cluster, Snapshot
from .config import MinerConfig
from .pipeline import Pipeline

__all__ = ["ClusterStore", "Cluster", "Snapshot", "MinerConfig", "Pipeline"]
