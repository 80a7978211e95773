"""Shared fixtures for Flowboard tests."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from src.client import ErpClient
from src.services.graph import GridLayout, WorkflowGraphMemo
from tests.factories import task, template


@pytest.fixture
def layout() -> GridLayout:
    """Default grid geometry."""
    return GridLayout()


@pytest.fixture
def memo(layout: GridLayout) -> WorkflowGraphMemo:
    """Memo large enough to hold both modes."""
    return WorkflowGraphMemo(layout, maxsize=8)


@pytest.fixture
def order_templates() -> list[dict[str, Any]]:
    """Order workflow definition: create -> validate -> (approve, dispatch)."""
    return [
        template(10, 1, task_type="creation", timeout_minutes=30),
        template(11, 2, [(10, "blocking")]),
        template(12, 3, [(11, "soft")], task_type="approval"),
        template(13, 4, [(11, "parallel"), (12, "blocking")], task_type="dispatch"),
    ]


@pytest.fixture
def order_tasks() -> list[dict[str, Any]]:
    """Run-time tasks of one order, half way through."""
    return [
        task(100, 1, "completed", task_type="creation"),
        task(101, 2, "completed", [(100, "blocking")]),
        task(102, 3, "in_progress", [(101, "blocking")]),
        task(103, 4, "pending", [(102, "soft")]),
    ]


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], ErpClient]:
    """Build an ErpClient answering through ``httpx.MockTransport``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> ErpClient:
        return ErpClient(
            "http://erp.test",
            token="secret-token",
            transport=httpx.MockTransport(handler),
        )

    return factory
