"""
Configuration for log mining runs.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

import yaml

__all__ = [
    "MinerConfig",
    "ConfigError",
    "load_config",
    "DEFAULT_MAX_DISTANCE",
    "DEFAULT_MIN_FREQUENCY",
    "DEFAULT_MAX_LINES",
    "CHANNEL_CAPACITY",
]

DEFAULT_MAX_DISTANCE = 0.7
DEFAULT_MIN_FREQUENCY = 100
DEFAULT_MAX_LINES = 5

# Capacity of each queue between pipeline stages
CHANNEL_CAPACITY = 10


class ConfigError(ValueError):
    """Invalid configuration, reported once at startup."""


@dataclass
class MinerConfig:
    """Configuration for a log mining run."""

    # Clustering
    max_distance: float = DEFAULT_MAX_DISTANCE  # Lower groups more aggressively

    # Output
    min_frequency: int = DEFAULT_MIN_FREQUENCY  # Hide clusters below this count
    max_lines: int = DEFAULT_MAX_LINES          # Clusters per snapshot
    refresh_interval: Optional[int] = None      # Seconds; None/0 = continuous mode

    # I/O - None = stdin/stdout
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    event_log_dir: Optional[str] = None

    verbose: bool = True

    @property
    def throttled(self) -> bool:
        return bool(self.refresh_interval)

    def validate(self) -> "MinerConfig":
        """Check value ranges. Raises ConfigError."""
        if isinstance(self.max_distance, bool) or not isinstance(self.max_distance, (int, float)):
            raise ConfigError(f"max_distance must be a number, got {self.max_distance!r}")
        if not 0.0 <= self.max_distance <= 1.0:
            raise ConfigError(
                f"max_distance must be between 0.0 and 1.0, got {self.max_distance}"
            )
        for name in ("min_frequency", "max_lines"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        interval = self.refresh_interval
        if interval is not None and (
            isinstance(interval, bool) or not isinstance(interval, int) or interval < 0
        ):
            raise ConfigError(
                f"refresh_interval must be a non-negative integer, got {interval!r}"
            )
        return self

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MinerConfig":
        """Create from dict, filtering out unknown keys."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def load_config(path: Path) -> MinerConfig:
    """
    Load a YAML config file.

    The file holds a mapping of MinerConfig field names, e.g.

        max_distance: 0.5
        min_frequency: 10
        refresh_interval: 4
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    return MinerConfig.from_dict(data).validate()
