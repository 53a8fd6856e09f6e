"""
Structured event log for log mining runs.

Single JSONL file with typed events for streaming and analysis.

Event types:
- run_start: Config
- snapshot_published: Snapshot handed to the renderer
- error: Failure that ended the run
- run_end: Summary stats
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Any, Optional

from .clustering import Snapshot


class EventLogger:
    def __init__(self, output_dir: Path):
        """
        Initialize logger for a run.

        Args:
            output_dir: Directory for the log file (created if missing)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.output_dir / "events.jsonl"

        # Open file in append mode
        self.file_handle = open(self.log_file, 'a', encoding='utf-8')

    def _write_event(self, event_type: str, data: dict[str, Any]) -> None:
        """Write typed event to JSONL log."""
        event = {
            "type": event_type,
            "timestamp": datetime.now().isoformat(),
            **data
        }
        self.file_handle.write(json.dumps(event) + '\n')
        self.file_handle.flush()  # Ensure streaming writes

    def log_run_start(self, config: dict[str, Any]) -> None:
        """
        Log run initialization.

        Args:
            config: Run configuration parameters
        """
        self._write_event("run_start", {"config": config})

    def log_snapshot(self, sequence: int, snapshot: Snapshot) -> None:
        """
        Log a snapshot handed to the renderer.

        Args:
            sequence: 1-based number of the snapshot within the run
            snapshot: The published snapshot
        """
        self._write_event("snapshot_published", {
            "sequence": sequence,
            **snapshot.to_dict(),
        })

    def log_error(self, message: str, error_type: str = "error") -> None:
        """
        Log error event.

        Args:
            message: Error description
            error_type: Exception class name or category
        """
        self._write_event("error", {
            "message": message,
            "error_type": error_type,
        })

    def log_run_end(self, stats: dict[str, Any], snapshots: Optional[int] = None) -> None:
        """
        Log run completion.

        Args:
            stats: ClusterStore stats (lines, clusters, largest)
            snapshots: Number of snapshots rendered
        """
        data = {"stats": stats}
        if snapshots is not None:
            data["snapshots"] = snapshots
        self._write_event("run_end", data)

    def close(self) -> None:
        """Close log file."""
        if hasattr(self, 'file_handle') and self.file_handle:
            self.file_handle.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
