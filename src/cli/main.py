#!/usr/bin/env python3
"""Flowboard CLI - render, fetch and watch workflow step graphs.

Graphs are printed to stdout; everything else goes through the logger.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from src.client import ErpClient
from src.exceptions.domain import EntityNotFoundError, FlowboardError, ValidationError
from src.models import StepKind, WorkflowGraph
from src.services.graph import (
    EXPORT_FORMATS,
    GridLayout,
    WorkflowGraphMemo,
    build_workflow_graph,
    export_graph,
)
from src.services.monitor import (
    StepFetcher,
    WorkflowGraphMonitor,
    order_source,
    task_source,
    template_source,
)
from src.settings import settings
from src.utils.logger import configure_from_settings, logger

MODES = [kind.value for kind in StepKind]


def load_steps(path: str | Path) -> list[Any]:
    """
    Read a step list from a JSON file.

    The file holds either a bare list or one of the backend envelopes:
    ``{"templates": [...]}``, ``{"tasks": [...]}`` or
    ``{"progress": {"tasks": [...]}}``.

    Raises:
        EntityNotFoundError: If the file does not exist
        ValidationError: If the file is not JSON or holds no step list
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise EntityNotFoundError(f"Step file not found: {file_path}")

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"{file_path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        if isinstance(data.get("progress"), dict):
            data = data["progress"]
        data = data.get("templates", data.get("tasks"))

    if not isinstance(data, list):
        raise ValidationError(f"{file_path} does not contain a step list")
    return data


def format_summary(graph: WorkflowGraph) -> str:
    """One-line description of a rendered graph."""
    if graph.is_empty:
        return f"[{graph.mode.value}] {graph.empty_message}"

    summary = f"[{graph.mode.value}] {len(graph.nodes)} steps, {len(graph.edges)} edges"
    if graph.progress is not None:
        summary += (
            f", {graph.progress.completed}/{graph.progress.total} completed"
            f" ({graph.progress.progress_percentage}%)"
        )
    return summary


def select_source(client: ErpClient, args: argparse.Namespace) -> tuple[StepFetcher, StepKind]:
    """Fetcher and mode for the ``--workflow-id`` / ``--order`` / ``--tasks`` selectors."""
    if args.workflow_id is not None:
        return template_source(client, args.workflow_id), StepKind.template
    if args.order is not None:
        return order_source(client, args.order, args.workflow_type), StepKind.execution

    workflow_type, entity_type, entity_id = args.tasks
    try:
        return task_source(client, workflow_type, entity_type, int(entity_id)), StepKind.execution
    except ValueError as e:
        raise ValidationError(f"Entity id must be an integer, got {entity_id!r}") from e


def format_workflows(workflows: list[dict[str, Any]]) -> str:
    """One line per workflow definition: id, name and description when present."""
    if not workflows:
        return "No workflows defined"

    lines = []
    for workflow in workflows:
        line = f"{workflow.get('id')}\t{workflow.get('name') or ''}"
        if workflow.get("description"):
            line += f" - {workflow['description']}"
        lines.append(line)
    return "\n".join(lines)


def render_file(path: str, mode: str, output_format: str) -> None:
    """Render a local step file and print it."""
    layout = GridLayout.from_settings(settings)
    items = load_steps(path)
    try:
        graph = build_workflow_graph(items, mode, layout)
    except ValidationError as e:
        raise e.with_context(f"{path}: {e}")
    print(export_graph(graph, output_format))


async def list_workflows() -> None:
    """Print the workflow definitions known to the backend."""
    async with ErpClient.from_settings(settings) as client:
        workflows = await client.get_workflows()
    print(format_workflows(workflows))


async def fetch_graph(args: argparse.Namespace) -> None:
    """Fetch one step list from the backend and print its graph."""
    layout = GridLayout.from_settings(settings)
    async with ErpClient.from_settings(settings) as client:
        fetch, mode = select_source(client, args)
        graph = build_workflow_graph(await fetch(), mode, layout)
    print(export_graph(graph, args.format))


async def watch_graph(args: argparse.Namespace) -> None:
    """Run the refresh loop until interrupted."""
    memo = WorkflowGraphMemo(GridLayout.from_settings(settings))

    def on_update(graph: WorkflowGraph) -> None:
        print(format_summary(graph), flush=True)

    async with ErpClient.from_settings(settings) as client:
        fetch, mode = select_source(client, args)
        monitor = WorkflowGraphMonitor(
            fetch, mode, on_update=on_update, refresh_interval=args.interval, memo=memo
        )
        async with monitor:
            await asyncio.Event().wait()


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the Flowboard API server."""
    import uvicorn

    host = host or settings.host or "127.0.0.1"
    port = port or settings.port or 8000

    logger.info(f"Starting Flowboard server at http://{host}:{port}")

    uvicorn.run(
        "src.api.app:app",
        host=host,
        port=port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


def add_source_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--workflow-id", type=int, default=None, help="Workflow definition id")
    group.add_argument(
        "--tasks",
        nargs=3,
        metavar=("WORKFLOW_TYPE", "ENTITY_TYPE", "ENTITY_ID"),
        default=None,
        help="Run-time tasks of one entity's workflow",
    )
    group.add_argument("--order", type=int, default=None, help="Order id, run-time tasks by order")
    parser.add_argument(
        "--workflow-type",
        default="bc",
        help="Workflow family used with --order (default: bc)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowboard", description="Flowboard CLI - ERP workflow step graphs"
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override the log level")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # render command
    render_parser = subparsers.add_parser("render", help="Render a step list from a JSON file")
    render_parser.add_argument("file", help="JSON file with a step list or backend envelope")
    render_parser.add_argument("--mode", choices=MODES, required=True, help="Step list kind")
    render_parser.add_argument(
        "--format", choices=EXPORT_FORMATS, default="json", help="Output format (default: json)"
    )

    # list command
    subparsers.add_parser("list", help="List workflow definitions on the backend")

    # fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Fetch and render a graph from the backend")
    add_source_arguments(fetch_parser)
    fetch_parser.add_argument(
        "--format", choices=EXPORT_FORMATS, default="json", help="Output format (default: json)"
    )

    # watch command
    watch_parser = subparsers.add_parser("watch", help="Print a summary whenever the graph changes")
    add_source_arguments(watch_parser)
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help=f"Refresh interval in seconds (default: {settings.refresh_interval})",
    )

    # run command
    run_parser = subparsers.add_parser("run", help="Run the API server")
    run_parser.add_argument(
        "--host", type=str, default=None, help="Host to bind to (default: 127.0.0.1)"
    )
    run_parser.add_argument(
        "--port", type=int, default=None, help="Port to bind to (default: 8000)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        configure_from_settings(settings, level=args.log_level.upper())

    try:
        if args.command == "render":
            render_file(args.file, args.mode, args.format)
        elif args.command == "list":
            asyncio.run(list_workflows())
        elif args.command == "fetch":
            asyncio.run(fetch_graph(args))
        elif args.command == "watch":
            asyncio.run(watch_graph(args))
        elif args.command == "run":
            run_server(args.host, args.port)
        else:
            parser.print_help()
            sys.exit(1)
    except FlowboardError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
