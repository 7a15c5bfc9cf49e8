"""Command-line interface for iconmatrix.

Replays ``create-icon`` messages against an in-memory document, standing in
for the design tool's UI.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from pathlib import Path
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from iconmatrix.core.canvas import MemoryCanvas, NodeKind
from iconmatrix.core.config.loader import LOG_LEVEL_ENV, configure_logging, load_app_config
from iconmatrix.core.config.models import AppConfig, LoggingConfig
from iconmatrix.core.generation.engine import IconEngine
from iconmatrix.core.generation.models import AssemblyMode, GenerationResult
from iconmatrix.core.transport import LogLevel, LogMessage, QueueChannel

console = Console()
logger = logging.getLogger(__name__)

_LEVEL_STYLES: dict[LogLevel, str] = {
    LogLevel.INFO: "white",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.SUCCESS: "green",
}


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _load_requests(path: Path) -> list[dict[str, Any]]:
    """Load one message or a list of messages from a JSON file."""
    data = _load_json(path)
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    raise ValueError(f"{path} must contain a message object or a list of them")


def _load_document(path: Path) -> list[str]:
    """Load the names of components already in the document."""
    data = _load_json(path)
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ValueError(f"{path} must contain a list of component names")
    return data


async def _print_messages(channel: QueueChannel) -> None:
    while (message := await channel.receive()) is not None:
        if isinstance(message, LogMessage):
            style = _LEVEL_STYLES[message.level]
            console.print(f"[{style}]{escape(message.message)}[/{style}]")


async def run_requests_async(
    requests: list[dict[str, Any]],
    canvas: MemoryCanvas,
    config: AppConfig,
) -> list[GenerationResult]:
    """Run messages through a fresh engine, streaming its log to the console.

    Args:
        requests: Raw inbound messages
        canvas: Document to generate into
        config: App config

    Returns:
        Results of the ``create-icon`` messages, in order
    """
    channel = QueueChannel()
    engine = IconEngine(canvas, channel, config)
    printer = asyncio.create_task(_print_messages(channel))

    engine.start()
    results: list[GenerationResult] = []
    for data in requests:
        result = await engine.handle_message(data)
        if result is not None:
            results.append(result)

    channel.close()
    await printer
    return results


def _results_table(results: list[GenerationResult]) -> Table:
    table = Table(title="Generated components")
    table.add_column("Component")
    table.add_column("Mode")
    table.add_column("Size", justify="right")
    table.add_column("Variants", justify="right")
    table.add_column("Problems")
    for result in results:
        table.add_row(
            escape(result.component_name),
            result.mode.value,
            f"{result.width:g}x{result.height:g}",
            str(result.node_count),
            "yes" if result.has_problems else "no",
        )
    return table


def run_command(args: argparse.Namespace) -> int:
    """Run the ``run`` subcommand.

    Returns:
        Exit code (0 for success, 1 for bad input or a zero-yield request)
    """
    try:
        config = load_app_config(Path(args.config) if args.config else None)
        # UI log lines are already printed, so keep Python logging quiet by default
        level = args.log_level or (None if args.config or os.getenv(LOG_LEVEL_ENV) else "WARNING")
        if level:
            config.logging = LoggingConfig.model_validate(
                {**config.logging.model_dump(), "level": level.upper()}
            )
        requests = _load_requests(Path(args.requests))
        existing = _load_document(Path(args.document)) if args.document else []
    except (OSError, ValueError) as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    configure_logging(config)

    canvas = MemoryCanvas()
    for name in existing:
        canvas.add_existing(name, NodeKind.COMPONENT_SET)
    logger.debug("Replaying %d messages against %d existing names", len(requests), len(existing))

    results = asyncio.run(run_requests_async(requests, canvas, config))
    console.print(_results_table(results))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(canvas.to_dict(), indent=2), encoding="utf-8")
        console.print(f"[green]Scene written to:[/green] {out_path}")

    if any(result.mode is AssemblyMode.ZERO_YIELD for result in results):
        return 1
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="iconmatrix",
        description="iconmatrix - build icon variant sets from theme/state bitmaps",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    run = sub.add_parser("run", help="Replay create-icon messages")
    run.add_argument(
        "--requests", required=True, help="JSON file with one message or a list of messages"
    )
    run.add_argument(
        "--document", default=None, help="JSON list of component names already on the page"
    )
    run.add_argument("--config", default=None, help="Path to app config (.json/.yaml)")
    run.add_argument("--out", default=None, help="Write the resulting scene as JSON")
    run.add_argument(
        "--log-level",
        default=None,
        help="Python log level (default: from --config, else WARNING)",
    )

    return p


def main() -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args()

    if args.cmd == "run":
        sys.exit(run_command(args))


if __name__ == "__main__":
    main()
