"""
Workflow graph router for Flowboard.

This module exposes the rendered step graph of a workflow definition or of
a running workflow, plus a backend-free render endpoint and the edge legend.
"""

from typing import Any

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from src.api.dependencies import ErpClientDep, GraphMemoDep, OutputFormatDep
from src.models import LegendEntry, StepKind, WorkflowGraph
from src.services.graph import export_graph, legend
from src.utils.logger import logger

router = APIRouter(
    tags=["Graph"],
    responses={
        400: {"description": "Unsupported format"},
        404: {"description": "Not found"},
        502: {"description": "ERP backend error"},
    },
)


class RenderRequest(BaseModel):
    """Step list to render without touching the backend."""

    mode: StepKind
    steps: list[dict[str, Any]] = Field(default_factory=list)


def graph_response(graph: WorkflowGraph, output_format: str) -> Response:
    """Serialize a graph as JSON, or as Mermaid/DOT text."""
    if output_format == "json":
        return JSONResponse(content=graph.model_dump(mode="json"))
    return PlainTextResponse(export_graph(graph, output_format))


@router.get("/workflows/{workflow_id}/graph", response_model=WorkflowGraph)
async def get_workflow_graph(
    workflow_id: int,
    client: ErpClientDep,
    memo: GraphMemoDep,
    output_format: OutputFormatDep,
) -> Response:
    """Render the template graph of a workflow definition."""
    templates = await client.get_templates(workflow_id)
    logger.debug(f"Rendering workflow {workflow_id} ({len(templates)} templates)")
    graph = memo.get(templates, StepKind.template)
    return graph_response(graph, output_format)


@router.get(
    "/tasks/workflow/{workflow_type}/{entity_type}/{entity_id}/graph",
    response_model=WorkflowGraph,
)
async def get_task_graph(
    workflow_type: str,
    entity_type: str,
    entity_id: int,
    client: ErpClientDep,
    memo: GraphMemoDep,
    output_format: OutputFormatDep,
) -> Response:
    """Render the execution graph of one business document's workflow."""
    tasks = await client.get_workflow_tasks(workflow_type, entity_type, entity_id)
    logger.debug(
        f"Rendering {workflow_type} workflow of {entity_type} {entity_id} ({len(tasks)} tasks)"
    )
    graph = memo.get(tasks, StepKind.execution)
    return graph_response(graph, output_format)


@router.post("/graph/render", response_model=WorkflowGraph)
async def render_graph(
    request: RenderRequest,
    memo: GraphMemoDep,
    output_format: OutputFormatDep,
) -> Response:
    """Render a posted step list in the requested mode.

    Raises:
        ValidationError: If a step cannot be read in the requested mode (422)
    """
    graph = memo.get(request.steps, request.mode)
    return graph_response(graph, output_format)


@router.get("/graph/legend")
async def get_legend() -> list[LegendEntry]:
    """Edge legend entries, in display order."""
    return legend()
