"""
Render assembly.

Zips positioned steps and resolved edges into the node and edge records
the drawing surface consumes.
"""

from collections import Counter
from collections.abc import Sequence

from src.models import (
    EdgeKind,
    EdgeMarker,
    GraphEdge,
    GraphNode,
    GridCell,
    NodeLabel,
    NodeStyle,
    Step,
)

from .layout import GridLayout
from .resolver import ResolvedEdge
from .styles import (
    TEMPLATE_MINIMAP_COLOR,
    color_for_task_type,
    icon_for_status,
    style_for_dependency_kind,
    style_for_status,
)


def edge_id(source: int | str, target: int | str) -> str:
    """Stable id for the edge ``source -> target``."""
    return f"e-{source}-{target}"


def timeout_text(timeout_minutes: int | None) -> str | None:
    if not timeout_minutes or timeout_minutes <= 0:
        return None
    return f"{timeout_minutes}min"


def build_node(step: Step, cell: GridCell, layout: GridLayout) -> GraphNode:
    """Node record for one step at its grid cell."""
    status_style = style_for_status(step.status)
    label = NodeLabel(
        name=step.name,
        task_type=step.task_type,
        task_type_color=color_for_task_type(step.task_type),
        icon=icon_for_status(step.status),
        order=step.order,
        timeout_minutes=step.timeout_minutes,
        timeout_text=timeout_text(step.timeout_minutes),
        show_status=step.is_execution,
        status=step.status if step.is_execution else None,
        status_style=status_style if step.is_execution else None,
    )
    style = NodeStyle(
        border=f"2px solid {status_style.border}",
        border_color=status_style.border,
        width=layout.node_width,
        fill=status_style.fill,
        text_color=status_style.text_color,
    )
    return GraphNode(
        id=str(step.id),
        position=cell.position,
        label=label,
        style=style,
        minimap_color=status_style.fill if step.is_execution else TEMPLATE_MINIMAP_COLOR,
    )


def build_edges(edges: Sequence[ResolvedEdge]) -> list[GraphEdge]:
    """Edge records for resolved edges.

    A repeated ``(source, target)`` pair keeps the plain id for its first
    occurrence; later ones get a ``-2``, ``-3`` ... suffix so ids stay unique.
    """
    seen: Counter[tuple[int, int]] = Counter()
    result = []
    for edge in edges:
        pair = (edge.source, edge.target)
        seen[pair] += 1
        ident = edge_id(*pair)
        if seen[pair] > 1:
            ident = f"{ident}-{seen[pair]}"

        style = style_for_dependency_kind(edge.kind)
        declared = edge.kind is not EdgeKind.sequential
        result.append(
            GraphEdge(
                id=ident,
                source=str(edge.source),
                target=str(edge.target),
                kind=edge.kind,
                style=style,
                animated=style.animated,
                marker_end=EdgeMarker(color=style.stroke),
                label=edge.kind.value if declared else None,
                label_color=style.stroke if declared else None,
            )
        )
    return result


def assemble(
    sorted_steps: Sequence[Step],
    cells: Sequence[GridCell],
    edges: Sequence[ResolvedEdge],
    layout: GridLayout,
) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Combine steps, their cells and resolved edges into render records."""
    nodes = [build_node(step, cell, layout) for step, cell in zip(sorted_steps, cells, strict=True)]
    return nodes, build_edges(edges)
