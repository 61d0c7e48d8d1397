"""benchdb CLI entry points.
This module exposes pipeline commands for import, processing, and passes.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import BenchConfig
from core.constants import ALL_STAGES_ALIAS, STAGE_NAMES
from core.errors import BenchError
from core.result_lines import format_result_lines
from store.bench_sdk import BenchClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="benchdb", description="Benchmark run pipeline CLI")
    parser.add_argument("--database-url", help="Override BENCHDB_DATABASE_URL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_process_command(subparsers)
    subparsers.add_parser("classify-gpus", help="Assign GPU brand and laptop state")
    _add_normalize_app_names_command(subparsers)
    subparsers.add_parser("map-models", help="Link run model names to the model dictionary")
    subparsers.add_parser("analyze", help="Count app details by identity null-ness")
    _add_add_models_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the benchdb CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.database_url)
        return _dispatch(parser, client, args)
    except BenchError as error:
        print(f"error={error}")
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    client: BenchClient,
    args: argparse.Namespace,
) -> int:
    if args.command == "import":
        return _print_lines(format_result_lines(client.import_file(args.source)))
    if args.command == "process":
        return _run_process_command(client, args)
    if args.command == "classify-gpus":
        return _print_lines(format_result_lines(client.classify_gpus()))
    if args.command == "normalize-app-names":
        return _run_normalize_app_names_command(client, args)
    if args.command == "map-models":
        return _print_lines(format_result_lines(client.map_models()))
    if args.command == "analyze":
        return _print_lines(format_result_lines(client.analyze_app_details()))
    if args.command == "add-models":
        inserted_count = client.add_model_names(args.names, base_model=args.base_model)
        return _print_lines((f"inserted_count={inserted_count}",))
    if args.command == "run-spec":
        return run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(database_url: str | None) -> BenchClient:
    """Build SDK client with optional database override.

    Args:
        database_url: Optional override URL.

    Returns:
        Configured SDK client.
    """
    config = BenchConfig.from_env()
    if database_url:
        config = replace(config, database_url=database_url)
    return BenchClient(config)


def _run_process_command(client: BenchClient, args: argparse.Namespace) -> int:
    """Handle process command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.stage == ALL_STAGES_ALIAS:
        lines: list[str] = []
        for result in client.process_all():
            lines.extend(format_result_lines(result))
        return _print_lines(lines)
    return _print_lines(format_result_lines(client.process(args.stage)))


def _run_normalize_app_names_command(client: BenchClient, args: argparse.Namespace) -> int:
    """Handle normalize-app-names command."""
    mapping = {
        "automatic1111": args.automatic1111,
        "vladmandic": args.vladmandic,
        "stable_diffusion": args.stable_diffusion,
        "null_app_name_null_url": args.null_app_name_null_url,
    }
    return _print_lines(format_result_lines(client.normalize_app_names(mapping)))


def _print_lines(lines: Sequence[str]) -> int:
    for line in lines:
        print(line)
    return 0


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import a JSON list of raw runs")
    parser.add_argument("source", help="Path to JSON upload file")


def _add_process_command(subparsers: Any) -> None:
    """Register process subcommand."""
    parser = subparsers.add_parser("process", help="Run a stage processor")
    parser.add_argument(
        "stage",
        choices=STAGE_NAMES + (ALL_STAGES_ALIAS,),
        help="Stage to run, or 'all' for every stage",
    )


def _add_normalize_app_names_command(subparsers: Any) -> None:
    """Register normalize-app-names subcommand."""
    parser = subparsers.add_parser(
        "normalize-app-names",
        help="Apply canonical application names",
    )
    parser.add_argument("--automatic1111", required=True, help="Name for AUTOMATIC1111 URLs")
    parser.add_argument("--vladmandic", required=True, help="Name for vladmandic URLs")
    parser.add_argument(
        "--stable-diffusion",
        required=True,
        help="Name for stable-diffusion-webui URLs without an app name",
    )
    parser.add_argument(
        "--null-app-name-null-url",
        required=True,
        help="Name for rows with neither app name nor URL",
    )


def _add_add_models_command(subparsers: Any) -> None:
    """Register add-models subcommand."""
    parser = subparsers.add_parser("add-models", help="Add names to the model dictionary")
    parser.add_argument("names", nargs="+", help="Model names")
    parser.add_argument("--base-model", help="Optional base model for the new names")
