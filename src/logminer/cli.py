"""
Log Miner CLI - cluster similar log lines and show the most frequent ones.

Usage:
    tail -f /var/log/syslog | logminer -M 0.7 -m 100 -l 5 -i 4
    logminer -f app.log -o clusters.txt -m 10
    logminer -c miner.yaml
"""

import argparse
import asyncio
import io
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

from rich.console import Console

from .clustering import ClusterStore
from .config import MinerConfig, ConfigError, load_config
from .logger import EventLogger
from .pipeline import Pipeline, read_lines
from .render import RunHeader, ScreenRenderer, StreamRenderer


EPILOG = """
Example:
    tail -f /var/log/syslog | logminer -M 0.7 -m 100 -l 5 -i 4

Credits:
    The clustering is using the LogMine algorithm described in the paper:
    https://www.cs.unm.edu/~mueen/Papers/LogMine.pdf
"""

# CLI flag -> MinerConfig field
FLAG_FIELDS = {
    "max_distance": "max_distance",
    "min_frequency": "min_frequency",
    "output_lines": "max_lines",
    "refresh_interval": "refresh_interval",
    "input_file": "input_file",
    "output_file": "output_file",
    "event_log": "event_log_dir",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logminer",
        description="A tool for mining logs. It clusters similar log lines together "
                    "and displays the most frequent ones.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-M", "--max-distance", type=float,
                        help="The maximum distance between two log messages in the same "
                             "cluster. It must be between 0.0 and 1.0 (default: 0.7)")
    parser.add_argument("-m", "--min-frequency", type=int,
                        help="The minimum frequency to be considered for printing to the "
                             "output (default: 100)")
    parser.add_argument("-l", "--output-lines", type=int,
                        help="The maximum number of lines to be printed on each output "
                             "refresh (default: 5)")
    parser.add_argument("-i", "--refresh-interval", type=int,
                        help="Screen output refresh interval in seconds")
    parser.add_argument("-f", "--input-file", help="Read input from a file instead of STDIN")
    parser.add_argument("-o", "--output-file", help="Write output to a file instead of STDOUT")
    parser.add_argument("-c", "--config", help="YAML config file (flags override it)")
    parser.add_argument("--event-log", help="Directory for a JSONL event log")
    parser.add_argument("-q", "--quiet", dest="verbose", action="store_false", default=None,
                        help="Do not print progress to stderr")
    return parser


def build_config(args: argparse.Namespace) -> MinerConfig:
    """Merge defaults, config file and explicit flags. Raises ConfigError."""
    if args.refresh_interval == 0:
        raise ConfigError("Refresh interval must be greater than 0")

    config = load_config(Path(args.config)) if args.config else MinerConfig()

    overrides = {
        field: getattr(args, flag)
        for flag, field in FLAG_FIELDS.items()
        if getattr(args, flag) is not None
    }
    if args.verbose is not None:
        overrides["verbose"] = args.verbose

    merged = config.to_dict()
    merged.update(overrides)
    return MinerConfig.from_dict(merged).validate()


def make_header(config: MinerConfig) -> RunHeader:
    return RunHeader(
        input_name=config.input_file or "STDIN",
        refresh_interval=config.refresh_interval or 0,
        max_distance=config.max_distance,
        max_lines=config.max_lines,
        min_frequency=config.min_frequency,
    )


def make_renderer(config: MinerConfig, console: Console):
    """Pick the renderer for the configured mode and sink."""
    if not config.throttled:
        return StreamRenderer(console)
    if console.is_terminal:
        return ScreenRenderer(console, make_header(config))
    return StreamRenderer(console, every=True)


def show_header(config: MinerConfig, console: Console) -> bool:
    """
    Clear a terminal and print the run header once, for continuous runs.

    Throttled runs redraw the header on every refresh and files never get
    one. Returns True if the header was printed.
    """
    if config.throttled or not console.is_terminal:
        return False
    console.clear()
    make_header(config).print(console)
    return True


def open_stdin():
    """Text view of stdin that replaces undecodable bytes instead of failing."""
    return io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace")


def run(config: MinerConfig) -> dict:
    """Run the pipeline over the configured input. Returns store stats."""
    with ExitStack() as stack:
        if config.input_file:
            source = stack.enter_context(
                open(config.input_file, encoding="utf-8", errors="replace")
            )
        else:
            source = open_stdin()
            # Leave the real stdin open when the wrapper goes away
            stack.callback(source.detach)

        if config.output_file:
            sink = stack.enter_context(open(config.output_file, "w", encoding="utf-8"))
            console = Console(file=sink, force_terminal=False)
        else:
            console = Console()
        show_header(config, console)

        logger = None
        if config.event_log_dir:
            logger = stack.enter_context(EventLogger(Path(config.event_log_dir)))
            logger.log_run_start(config.to_dict())

        pipeline = Pipeline(
            store=ClusterStore(config.max_distance),
            renderer=make_renderer(config, console),
            min_frequency=config.min_frequency,
            max_lines=config.max_lines,
            refresh_interval=config.refresh_interval,
            logger=logger,
            verbose=config.verbose,
        )
        return asyncio.run(pipeline.run(read_lines(source)))


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        run(config)
    except KeyboardInterrupt:
        return 130
    except BrokenPipeError:
        # Downstream reader went away; stop quietly
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
