"""
Workflow graph export.

This module renders a ``WorkflowGraph`` as a Mermaid flowchart or a GraphViz
DOT digraph, and can write the Mermaid form to a Markdown file.
"""

from pathlib import Path

from src.models import EdgeKind, GraphEdge, GraphNode, WorkflowGraph
from src.utils.logger import logger

EXPORT_FORMATS = ["json", "mermaid", "dot"]


def _mermaid_id(node_id: str) -> str:
    return f"s{node_id}".replace("-", "_")


def _mermaid_escape(text: str) -> str:
    return " ".join(text.replace('"', "'").splitlines())


def _dot_escape(text: str) -> str:
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    return "\\n".join(text.splitlines())


def _caption_parts(node: GraphNode) -> list[str]:
    parts = [node.label.name, node.label.task_type, f"Order: {node.label.order}"]
    if node.label.timeout_text:
        parts.append(node.label.timeout_text)
    if node.label.show_status:
        parts.append(f"[{node.label.status or 'unknown'}]")
    return parts


def _mermaid_arrow(edge: GraphEdge) -> str:
    match edge.kind:
        case EdgeKind.blocking:
            arrow = "=="
            tail = "==>"
        case EdgeKind.sequential:
            return "-.->"
        case _:
            arrow = "--"
            tail = "-->"
    if edge.label:
        return f"{arrow} {edge.label} {tail}"
    return tail


def to_mermaid(graph: WorkflowGraph, direction: str = "LR") -> str:
    """
    Generate a Mermaid flowchart for the graph.

    Args:
        graph: Rendered workflow graph
        direction: Mermaid flow direction (``LR``, ``TD``, ...)

    Returns:
        Mermaid source, without Markdown fences
    """
    lines = [f"flowchart {direction}"]

    for node in graph.nodes:
        caption = "<br>".join(_mermaid_escape(part) for part in _caption_parts(node))
        lines.append(f'    {_mermaid_id(node.id)}["{caption}"]')

    for edge in graph.edges:
        lines.append(f"    {_mermaid_id(edge.source)} {_mermaid_arrow(edge)} {_mermaid_id(edge.target)}")

    for node in graph.nodes:
        lines.append(
            f"    style {_mermaid_id(node.id)} fill:{node.style.fill},"
            f"stroke:{node.style.border_color},color:{node.style.text_color}"
        )

    return "\n".join(lines)


def to_dot(graph: WorkflowGraph) -> str:
    """
    Generate a GraphViz DOT digraph for the graph.

    Node positions are not carried over; DOT consumers lay the graph out
    themselves.
    """
    dot = ["digraph Workflow {", "  rankdir=LR;", "  node [shape=box, style=\"rounded,filled\"];"]

    for node in graph.nodes:
        caption = "\\n".join(_dot_escape(part) for part in _caption_parts(node))
        dot.append(
            f'  "{node.id}" [label="{caption}", fillcolor="{node.style.fill}", '
            f'color="{node.style.border_color}", fontcolor="{node.style.text_color}"];'
        )

    for edge in graph.edges:
        attrs = [f'color="{edge.style.stroke}"']
        if edge.style.dashed:
            attrs.append("style=dashed")
        if edge.kind is EdgeKind.blocking:
            attrs.append("style=bold")
        if edge.label:
            attrs.append(f'label="{_dot_escape(edge.label)}"')
        dot.append(f'  "{edge.source}" -> "{edge.target}" [{", ".join(attrs)}];')

    dot.append("}")
    return "\n".join(dot)


def export_graph(graph: WorkflowGraph, output_format: str) -> str:
    """Serialize a graph in one of ``EXPORT_FORMATS``.

    Raises:
        ValueError: If the format is not supported
    """
    match output_format:
        case "json":
            return graph.model_dump_json(indent=2)
        case "mermaid":
            return to_mermaid(graph)
        case "dot":
            return to_dot(graph)
        case _:
            raise ValueError(f"Unsupported output format: {output_format}")


def export_mermaid_markdown(
    graph: WorkflowGraph,
    output_path: str | Path,
    filename: str = "workflow_diagram.md",
) -> Path:
    """
    Write the Mermaid flowchart of a graph to a Markdown file.

    Args:
        graph: Rendered workflow graph
        output_path: Directory to save the diagram in
        filename: Name of the diagram file

    Returns:
        Path to the generated diagram file
    """
    output_dir = Path(output_path)
    output_dir.mkdir(parents=True, exist_ok=True)
    diagram_path = output_dir / filename

    diagram_path.write_text(f"```mermaid\n{to_mermaid(graph)}\n```\n", encoding="utf-8")

    logger.info(f"Workflow diagram exported to {diagram_path}")
    return diagram_path
