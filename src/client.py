"""
ERP backend API client.

This module provides the async client Flowboard uses to read workflow task
templates and run-time task lists from the ERP backend.
"""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.exceptions.domain import FlowboardError
from src.models import ExecutionStep, TemplateStep
from src.settings import Settings
from src.utils.logger import logger

TASK_BASE = "/api/backend/tasks"
WORKFLOW_BASE = "/api/backend/workflow-templates"

M = TypeVar("M", bound=BaseModel)


class ErpAPIError(FlowboardError):
    """Base exception for ERP backend errors."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ErpAuthError(ErpAPIError):
    """The backend rejected or did not receive credentials."""

    pass


class ErpNotFoundError(ErpAPIError):
    """The requested workflow or entity does not exist on the backend."""

    pass


class ErpClient:
    """Client for the ERP backend's workflow endpoints.

    Example:
        ```python
        async with ErpClient("http://localhost:8000", token="...") as client:
            templates = await client.get_templates(3)
            tasks = await client.get_workflow_tasks("bc", "order", 42)
        ```
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 60.0,
        log_requests: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the ERP backend (e.g., "http://localhost:8000")
            token: Bearer token sent with every request
            timeout: Request timeout in seconds
            log_requests: Enable request/response logging
            transport: Custom httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.log_requests = log_requests

        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    @classmethod
    def from_settings(cls, config: Settings, **kwargs: Any) -> "ErpClient":
        """Create a client from the backend section of the settings."""
        return cls(
            config.backend_url,
            token=config.backend_token,
            timeout=config.backend_timeout,
            log_requests=config.backend_log_requests,
            **kwargs,
        )

    async def __aenter__(self) -> "ErpClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    def _log_request(self, method: str, url: str, **kwargs: Any) -> None:
        if self.log_requests:
            logger.debug(f"API Request: {method} {url}", extra={"request_data": kwargs})

    def _log_response(self, response: httpx.Response) -> None:
        if self.log_requests:
            logger.debug(
                f"API Response: {response.status_code}",
                extra={"response_data": response.text},
            )

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        """Make HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (e.g., "/api/backend/tasks")
            **kwargs: Additional arguments passed to httpx request

        Returns:
            HTTP response

        Raises:
            ErpAuthError: On 401/403
            ErpNotFoundError: On 404
            ErpAPIError: On any other error status or transport failure
        """
        self._log_request(method, endpoint, **kwargs)

        try:
            response = await self.client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during request: {e}")
            raise ErpAPIError(f"HTTP error: {e!s}") from e

        self._log_response(response)

        if response.status_code in (401, 403):
            raise ErpAuthError(
                "Authentication required or access forbidden",
                status_code=response.status_code,
                detail=response.text,
            )
        if response.status_code == 404:
            raise ErpNotFoundError(
                f"Not found: {endpoint}",
                status_code=404,
                detail=response.text,
            )
        if response.status_code >= 400:
            detail: Any
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            raise ErpAPIError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        return response

    async def _get_json(self, endpoint: str) -> dict[str, Any]:
        response = await self._request("GET", endpoint)
        try:
            payload = response.json()
        except ValueError as e:
            raise ErpAPIError(
                "Backend returned a non-JSON body", status_code=response.status_code
            ) from e
        if not isinstance(payload, dict):
            raise ErpAPIError("Backend returned an unexpected payload", detail=payload)
        return payload

    @staticmethod
    def _parse(model: type[M], items: list[Any]) -> list[M]:
        try:
            return [model.model_validate(item) for item in items]
        except PydanticValidationError as e:
            raise ErpAPIError(
                f"Backend returned a malformed {model.__name__} list",
                detail=e.errors(include_url=False, include_context=False),
            ) from e

    # ==================== Workflow definitions ====================

    async def get_workflows(self) -> list[dict[str, Any]]:
        """List workflow definitions (raw dictionaries)."""
        payload = await self._get_json(WORKFLOW_BASE)
        return list(payload.get("workflows") or [])

    async def get_templates(self, workflow_id: int) -> list[TemplateStep]:
        """Get the task templates of a workflow definition.

        Args:
            workflow_id: Workflow definition id

        Returns:
            Template steps in backend order
        """
        payload = await self._get_json(f"{WORKFLOW_BASE}/{workflow_id}/templates")
        return self._parse(TemplateStep, payload.get("templates") or [])

    # ==================== Run-time tasks ====================

    async def get_workflow_progress(
        self, workflow_type: str, entity_type: str, entity_id: int
    ) -> dict[str, Any]:
        """Raw progress payload for one business document's workflow."""
        payload = await self._get_json(
            f"{TASK_BASE}/workflow/{workflow_type}/{entity_type}/{entity_id}/progress"
        )
        return dict(payload.get("progress") or {})

    async def get_workflow_tasks(
        self, workflow_type: str, entity_type: str, entity_id: int
    ) -> list[ExecutionStep]:
        """Get the run-time tasks of one business document's workflow.

        Args:
            workflow_type: Workflow family (``bc``, ``bl``, ``bch``, ``bp``)
            entity_type: Backend entity type the workflow is attached to
            entity_id: Entity id

        Returns:
            Execution steps in backend order
        """
        progress = await self.get_workflow_progress(workflow_type, entity_type, entity_id)
        return self._parse(ExecutionStep, progress.get("tasks") or [])

    async def get_order_tasks(self, order_id: int, workflow_type: str = "bc") -> list[ExecutionStep]:
        """Get the run-time tasks of an order's workflow by model id."""
        payload = await self._get_json(f"{TASK_BASE}/{workflow_type}/{order_id}/progress")
        progress = payload.get("progress") or {}
        return self._parse(ExecutionStep, progress.get("tasks") or [])
