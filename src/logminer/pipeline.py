"""
Concurrent clustering pipeline.

Core loop: read line → assign → rank → publish snapshot → render.

    feed ──lines──▶ ingest ──snapshots──▶ publish ──display──▶ render

Stages are asyncio tasks joined by bounded queues, so a slow renderer
suspends the stages upstream of it instead of letting snapshots pile up.
The ClusterStore is only ever touched by the ingest task.

Publication runs in one of two modes:
- continuous: every snapshot is forwarded to the renderer
- throttled: snapshots overwrite a LatestValue cell that a timer samples
  every refresh_interval seconds
"""

from __future__ import annotations

import asyncio
import inspect
import sys
from typing import Any, AsyncIterable, AsyncIterator, Optional, Protocol, TextIO

from .clustering import ClusterStore, Snapshot
from .config import CHANNEL_CAPACITY
from .logger import EventLogger


# End-of-stream marker passed down every queue
_CLOSED = object()


class Renderer(Protocol):
    """Sink for published snapshots. render() may be sync or async."""

    def render(self, snapshot: Snapshot) -> Any: ...

    def close(self) -> None: ...


class LatestValue:
    """
    Single-slot cell holding the most recent write.

    Writes overwrite whatever has not been read yet. `version` counts writes
    so a reader can tell whether anything new arrived since its last read.
    """

    def __init__(self, initial: Any = None):
        self._value = initial
        self.version = 0

    def set(self, value: Any) -> None:
        self._value = value
        self.version += 1

    def get(self) -> Any:
        return self._value


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


async def read_lines(stream: TextIO) -> AsyncIterator[str]:
    """Yield lines from a text stream without blocking the event loop."""
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        yield _strip_newline(line)


class Pipeline:
    """
    Runs lines through a ClusterStore and hands snapshots to a renderer.

    Supports continuous and throttled publication.
    """

    def __init__(
        self,
        store: ClusterStore,
        renderer: Renderer,
        min_frequency: int,
        max_lines: int,
        refresh_interval: Optional[float] = None,
        channel_capacity: int = CHANNEL_CAPACITY,
        logger: Optional[EventLogger] = None,
        verbose: bool = False,
    ):
        """
        Initialize pipeline.

        Args:
            store: ClusterStore to feed (owned by the pipeline while running)
            renderer: Receives snapshots in production order
            min_frequency: Hide clusters with fewer matches
            max_lines: Maximum clusters per snapshot
            refresh_interval: Seconds between renders; None/0 = every snapshot
            channel_capacity: Size of each queue between stages
            logger: Optional event log
            verbose: Print stage progress to stderr
        """
        self.store = store
        self.renderer = renderer
        self.min_frequency = min_frequency
        self.max_lines = max_lines
        self.refresh_interval = refresh_interval
        self.channel_capacity = channel_capacity
        self.logger = logger
        self.verbose = verbose

        # Tracking
        self.snapshots_published = 0
        self.snapshots_rendered = 0

    @property
    def throttled(self) -> bool:
        return bool(self.refresh_interval)

    def _status(self, message: str) -> None:
        if self.verbose:
            print(message, file=sys.stderr)

    async def run(self, lines: AsyncIterable[str]) -> dict:
        """
        Process lines until the source is exhausted and every stage has drained.

        Returns:
            ClusterStore stats: {lines, clusters, largest}
        """
        capacity = self.channel_capacity
        line_queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        snapshot_queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        display_queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)

        stages = [
            self._feed(lines, line_queue),
            self._ingest(line_queue, snapshot_queue),
        ]
        if self.throttled:
            latest = LatestValue()
            closed = asyncio.Event()
            stages.append(self._hold_latest(snapshot_queue, latest, closed))
            stages.append(self._sample(latest, closed, display_queue))
        else:
            stages.append(self._forward(snapshot_queue, display_queue))
        stages.append(self._render(display_queue))

        tasks = [asyncio.create_task(stage) for stage in stages]
        try:
            await asyncio.gather(*tasks)
        except BaseException as e:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if self.logger and isinstance(e, Exception):
                self.logger.log_error(str(e), error_type=type(e).__name__)
            raise

        stats = self.store.stats()
        self._status(
            f"Processed {stats['lines']} lines into {stats['clusters']} clusters"
        )
        if self.logger:
            self.logger.log_run_end(stats, snapshots=self.snapshots_rendered)
        return stats

    async def _feed(self, lines: AsyncIterable[str], outbox: asyncio.Queue) -> None:
        # Close async generators here, also on cancellation
        aclose = getattr(lines, "aclose", None)
        try:
            async for line in lines:
                await outbox.put(line)
            await outbox.put(_CLOSED)
        finally:
            if aclose is not None:
                await aclose()

    async def _ingest(self, inbox: asyncio.Queue, outbox: asyncio.Queue) -> None:
        self._status("Starting clusterer")
        while True:
            line = await inbox.get()
            if line is _CLOSED:
                break
            self.store.assign(line)
            self.store.rank()
            await outbox.put(self.store.snapshot(self.min_frequency, self.max_lines))
            self.snapshots_published += 1
        await outbox.put(_CLOSED)

    async def _forward(self, inbox: asyncio.Queue, outbox: asyncio.Queue) -> None:
        while True:
            snapshot = await inbox.get()
            await outbox.put(snapshot)
            if snapshot is _CLOSED:
                break

    async def _hold_latest(
        self,
        inbox: asyncio.Queue,
        latest: LatestValue,
        closed: asyncio.Event,
    ) -> None:
        while True:
            snapshot = await inbox.get()
            if snapshot is _CLOSED:
                break
            latest.set(snapshot)
        closed.set()

    async def _sample(
        self,
        latest: LatestValue,
        closed: asyncio.Event,
        outbox: asyncio.Queue,
    ) -> None:
        self._status(f"Starting display timer ({self.refresh_interval}s)")
        sent_version = 0
        done = False
        while not done:
            try:
                await asyncio.wait_for(closed.wait(), timeout=self.refresh_interval)
                done = True
            except asyncio.TimeoutError:
                pass
            # On close this is the final flush
            if latest.version != sent_version:
                sent_version = latest.version
                await outbox.put(latest.get())
        await outbox.put(_CLOSED)

    async def _render(self, inbox: asyncio.Queue) -> None:
        while True:
            snapshot = await inbox.get()
            if snapshot is _CLOSED:
                break
            result = self.renderer.render(snapshot)
            if inspect.isawaitable(result):
                await result
            self.snapshots_rendered += 1
            if self.logger:
                self.logger.log_snapshot(self.snapshots_rendered, snapshot)
        self.renderer.close()
