"""Tests for the periodic graph refresh loop."""

import asyncio
from typing import Any

import httpx
import pytest

from src.models import StepKind, WorkflowGraph
from src.services.monitor import WorkflowGraphMonitor, order_source, task_source, template_source
from src.settings import settings
from tests.factories import task, template


class FakeSource:
    """Step fetcher returning a scripted sequence of responses."""

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.calls = 0

    async def __call__(self) -> list[dict[str, Any]]:
        self.calls += 1
        response = self.responses[min(self.calls, len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


class TestRefreshOnce:
    """Single refresh cycles."""

    @pytest.mark.asyncio
    async def test_notifies_on_first_graph(self) -> None:
        updates: list[WorkflowGraph] = []
        monitor = WorkflowGraphMonitor(
            FakeSource([task(1, 1, "ready")]), "execution", on_update=updates.append
        )

        graph = await monitor.refresh_once()

        assert updates == [graph]
        assert monitor.graph is graph
        assert graph.mode is StepKind.execution

    @pytest.mark.asyncio
    async def test_unchanged_input_does_not_notify(self) -> None:
        updates: list[WorkflowGraph] = []
        source = FakeSource([task(1, 1, "ready")], [task(1, 1, "ready")])
        monitor = WorkflowGraphMonitor(source, "execution", on_update=updates.append)

        first = await monitor.refresh_once()
        second = await monitor.refresh_once()

        assert second is first
        assert len(updates) == 1

    @pytest.mark.asyncio
    async def test_changed_input_notifies(self) -> None:
        updates: list[WorkflowGraph] = []
        source = FakeSource([task(1, 1, "ready")], [task(1, 1, "completed")])
        monitor = WorkflowGraphMonitor(source, "execution", on_update=updates.append)

        await monitor.refresh_once()
        await monitor.refresh_once()

        assert len(updates) == 2
        assert updates[1].nodes[0].label.status == "completed"

    @pytest.mark.asyncio
    async def test_async_callback(self) -> None:
        updates: list[WorkflowGraph] = []

        async def on_update(graph: WorkflowGraph) -> None:
            updates.append(graph)

        monitor = WorkflowGraphMonitor(FakeSource([template(1, 1)]), "template", on_update=on_update)
        await monitor.refresh_once()

        assert len(updates) == 1

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self) -> None:
        monitor = WorkflowGraphMonitor(FakeSource(RuntimeError("down")), "template")

        with pytest.raises(RuntimeError):
            await monitor.refresh_once()


class TestRefreshLoop:
    """Background loop lifecycle."""

    @pytest.mark.asyncio
    async def test_loop_refreshes_until_stopped(self) -> None:
        source = FakeSource([template(1, 1)])
        monitor = WorkflowGraphMonitor(source, "template", refresh_interval=0.01)

        await monitor.start()
        await asyncio.sleep(0.05)
        await monitor.stop()
        calls = source.calls
        await asyncio.sleep(0.03)

        assert calls >= 2
        assert source.calls == calls
        assert not monitor.is_running
        assert monitor._task is None

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        updates: list[WorkflowGraph] = []
        monitor = WorkflowGraphMonitor(
            FakeSource([template(1, 1)]), "template", on_update=updates.append, refresh_interval=10
        )

        async with monitor:
            await asyncio.sleep(0.01)
            assert monitor.is_running

        assert not monitor.is_running
        assert len(updates) == 1

    @pytest.mark.asyncio
    async def test_errors_are_kept_and_loop_continues(self) -> None:
        source = FakeSource(RuntimeError("backend down"), [template(1, 1)])
        monitor = WorkflowGraphMonitor(source, "template", refresh_interval=0.01)

        async with monitor:
            await asyncio.sleep(0.005)
            assert isinstance(monitor.last_error, RuntimeError)
            await asyncio.sleep(0.05)

        assert source.calls >= 2
        assert monitor.last_error is None
        assert monitor.graph is not None

    @pytest.mark.asyncio
    async def test_double_start(self) -> None:
        monitor = WorkflowGraphMonitor(FakeSource([]), "template", refresh_interval=10)

        await monitor.start()
        task_ref = monitor._task
        await monitor.start()

        assert monitor._task is task_ref
        await monitor.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self) -> None:
        monitor = WorkflowGraphMonitor(FakeSource([]), "template")

        await monitor.stop()

        assert monitor._task is None

    def test_zero_interval_is_kept(self) -> None:
        """An explicit zero interval is not replaced by the configured default."""
        monitor = WorkflowGraphMonitor(FakeSource([]), "template", refresh_interval=0)

        assert monitor.refresh_interval == 0

    def test_default_interval_from_settings(self) -> None:
        monitor = WorkflowGraphMonitor(FakeSource([]), "template")

        assert monitor.refresh_interval == settings.refresh_interval


class TestSources:
    """Fetchers bound to the ERP client."""

    @pytest.mark.asyncio
    async def test_template_source(self, make_client: Any) -> None:
        payload = {"templates": [template(1, 1)]}

        async with make_client(lambda _: httpx.Response(200, json=payload)) as client:
            steps = await template_source(client, 3)()

        assert steps[0].id == 1

    @pytest.mark.asyncio
    async def test_task_source(self, make_client: Any) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"progress": {"tasks": [task(2, 1)]}})

        async with make_client(handler) as client:
            steps = await task_source(client, "bl", "delivery_note", 8)()

        assert steps[0].id == 2
        assert paths == ["/api/backend/tasks/workflow/bl/delivery_note/8/progress"]

    @pytest.mark.asyncio
    async def test_order_source(self, make_client: Any) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"progress": {"tasks": [task(4, 1)]}})

        async with make_client(handler) as client:
            steps = await order_source(client, 12)()

        assert steps[0].id == 4
        assert paths == ["/api/backend/tasks/bc/12/progress"]
