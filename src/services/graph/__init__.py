"""
Workflow step graph engine.

Builds the node/edge render model for a list of workflow template steps or
run-time tasks: dependency edges with a sequential fallback, a wrapped grid
layout keyed on step order, and status-driven styling.

Example:
    ```python
    from src.services.graph import build_workflow_graph

    graph = build_workflow_graph(templates, mode="template")
    for edge in graph.edges:
        print(edge.source, "->", edge.target, edge.kind)
    ```
"""

from .assembler import assemble, build_edges, build_node, edge_id
from .engine import EMPTY_MESSAGES, WorkflowGraphMemo, build_workflow_graph, render_steps
from .export import EXPORT_FORMATS, export_graph, export_mermaid_markdown, to_dot, to_mermaid
from .layout import GridLayout, assign_cells, center_graph
from .normalizer import as_step_kind, normalize_steps, parse_payloads
from .progress import summarize_progress
from .resolver import ResolvedEdge, dependency_kind, resolve_edges, sort_steps
from .styles import (
    color_for_task_type,
    icon_for_status,
    legend,
    style_for_dependency_kind,
    style_for_status,
)

__all__ = [
    "EMPTY_MESSAGES",
    "EXPORT_FORMATS",
    "GridLayout",
    "ResolvedEdge",
    "WorkflowGraphMemo",
    "as_step_kind",
    "assemble",
    "assign_cells",
    "build_edges",
    "build_node",
    "build_workflow_graph",
    "center_graph",
    "color_for_task_type",
    "dependency_kind",
    "edge_id",
    "export_graph",
    "export_mermaid_markdown",
    "icon_for_status",
    "legend",
    "normalize_steps",
    "parse_payloads",
    "render_steps",
    "resolve_edges",
    "sort_steps",
    "style_for_dependency_kind",
    "style_for_status",
    "summarize_progress",
    "to_dot",
    "to_mermaid",
]
