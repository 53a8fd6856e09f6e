"""
Test snapshot renderers
"""

import io

from rich.console import Console

from logminer.clustering import Snapshot, SnapshotLine
from logminer.render import RunHeader, ScreenRenderer, StreamRenderer


SNAPSHOT = Snapshot(lines=(
    SnapshotLine(120, "GET /api/items 200 [cache=hit]"),
    SnapshotLine(101, "worker\tstarted :thumbs_up:"),
))


def file_console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, force_terminal=False), buffer


def terminal_console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, force_terminal=True, color_system=None, width=200), buffer


def test_stream_renderer_writes_latest_on_close():
    """Continuous mode output is the final snapshot only."""
    console, buffer = file_console()
    renderer = StreamRenderer(console)

    renderer.render(Snapshot(lines=(SnapshotLine(1, "GET /api/items 200 [cache=hit]"),)))
    renderer.render(SNAPSHOT)
    assert buffer.getvalue() == ""

    renderer.close()
    assert buffer.getvalue() == SNAPSHOT.to_text()
    print("  ✓ Final snapshot written verbatim on close")


def test_stream_renderer_every_snapshot():
    console, buffer = file_console()
    renderer = StreamRenderer(console, every=True)

    renderer.render(SNAPSHOT)
    renderer.render(SNAPSHOT)
    renderer.close()

    blocks = [b for b in buffer.getvalue().split("\n\n") if b]
    assert len(blocks) == 2
    assert Snapshot.parse(blocks[0]) == SNAPSHOT
    print("  ✓ Each snapshot written as its own block")


def test_stream_renderer_nothing_to_write():
    console, buffer = file_console()
    StreamRenderer(console).close()
    assert buffer.getvalue() == ""


def test_screen_renderer_redraws_with_header():
    """Terminal output carries the header and escaped cluster text."""
    console, buffer = terminal_console()
    header = RunHeader(
        input_name="STDIN", refresh_interval=4, max_distance=0.7, max_lines=5, min_frequency=100,
    )
    renderer = ScreenRenderer(console, header)

    renderer.render(SNAPSHOT)
    renderer.close()
    output = buffer.getvalue()

    assert "=== Log Miner" in output
    assert "=== Input: STDIN" in output
    assert "=== Refresh interval: 4" in output
    assert "=== Max distance (clustering factor): 0.70" in output
    assert "=== Output lines per screen: 5" in output
    assert "=== Min frequency displayed: 100" in output
    # Brackets in log text are not console markup
    assert "120, GET /api/items 200 [cache=hit]" in output
    assert ":thumbs_up:" in output
    print("  ✓ Screen shows header and clusters")


def test_run_header_rows():
    rows = dict(RunHeader(input_name="app.log", max_distance=0.5).rows())
    assert rows["Input"] == "app.log"
    assert rows["Max distance (clustering factor)"] == "0.50"


if __name__ == "__main__":
    test_stream_renderer_writes_latest_on_close()
    test_stream_renderer_every_snapshot()
    test_stream_renderer_nothing_to_write()
    test_screen_renderer_redraws_with_header()
    test_run_header_rows()
    print("\n✅ All render tests passed!")
