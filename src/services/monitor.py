"""
Background refresh loop for a rendered workflow graph.

Re-fetches the step list on a fixed interval and re-renders it through a
memo, notifying the host only when the rendered graph actually changed.
"""

import asyncio
import contextlib
import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeAlias

from src.client import ErpClient
from src.models import StepKind, WorkflowGraph
from src.services.graph import WorkflowGraphMemo, as_step_kind
from src.settings import settings
from src.utils.logger import logger

StepFetcher: TypeAlias = Callable[[], Awaitable[Sequence[Any]]]
GraphCallback: TypeAlias = Callable[[WorkflowGraph], Awaitable[None] | None]


def template_source(client: ErpClient, workflow_id: int) -> StepFetcher:
    """Fetcher returning the templates of one workflow definition."""

    async def fetch() -> Sequence[Any]:
        return await client.get_templates(workflow_id)

    return fetch


def task_source(client: ErpClient, workflow_type: str, entity_type: str, entity_id: int) -> StepFetcher:
    """Fetcher returning the run-time tasks of one entity's workflow."""

    async def fetch() -> Sequence[Any]:
        return await client.get_workflow_tasks(workflow_type, entity_type, entity_id)

    return fetch


def order_source(client: ErpClient, order_id: int, workflow_type: str = "bc") -> StepFetcher:
    """Fetcher returning the run-time tasks of an order's workflow."""

    async def fetch() -> Sequence[Any]:
        return await client.get_order_tasks(order_id, workflow_type)

    return fetch


class WorkflowGraphMonitor:
    """Periodically refresh a workflow graph.

    The loop must be stopped on teardown; ``stop()`` cancels the pending
    sleep or fetch and waits for the task to finish.
    """

    def __init__(
        self,
        fetch: StepFetcher,
        mode: StepKind | str,
        on_update: GraphCallback | None = None,
        refresh_interval: float | None = None,
        memo: WorkflowGraphMemo | None = None,
    ):
        """Initialize the monitor.

        Args:
            fetch: Coroutine function returning the current step list
            mode: ``template`` or ``execution``
            on_update: Called with the new graph whenever it changes
            refresh_interval: Seconds between refreshes
            memo: Graph memo, a single-entry one by default
        """
        self.fetch = fetch
        self.mode = as_step_kind(mode)
        self.on_update = on_update
        self.refresh_interval = (
            refresh_interval if refresh_interval is not None else settings.refresh_interval
        )
        self.memo = memo or WorkflowGraphMemo(maxsize=1)
        self.graph: WorkflowGraph | None = None
        self.last_error: Exception | None = None
        self.is_running = False
        self._task: asyncio.Task | None = None

    async def __aenter__(self) -> "WorkflowGraphMonitor":
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        """Start the refresh loop."""
        if self.is_running:
            logger.warning("Workflow graph monitor already running")
            return

        self.is_running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info(f"Workflow graph monitor started ({self.mode.value}, every {self.refresh_interval}s)")

    async def stop(self) -> None:
        """Stop the refresh loop and wait for it to wind down."""
        self.is_running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        logger.info("Workflow graph monitor stopped")

    async def refresh_once(self) -> WorkflowGraph:
        """Fetch, render and notify once.

        Returns:
            The current graph, which is the previous object when nothing changed
        """
        items = await self.fetch()
        graph = self.memo.get(items, self.mode)
        changed = graph is not self.graph
        self.graph = graph
        self.last_error = None

        if changed and self.on_update is not None:
            result = self.on_update(graph)
            if inspect.isawaitable(result):
                await result
        return graph

    async def _refresh_loop(self) -> None:
        while self.is_running:
            try:
                await self.refresh_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.last_error = e
                logger.error(f"Error refreshing workflow graph: {e}")
            await asyncio.sleep(self.refresh_interval)
