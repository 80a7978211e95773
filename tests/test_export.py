"""Tests for Mermaid and DOT export of rendered graphs."""

import json
from pathlib import Path
from typing import Any

import pytest

from src.models import WorkflowGraph
from src.services.graph import (
    build_workflow_graph,
    export_graph,
    export_mermaid_markdown,
    to_dot,
    to_mermaid,
)
from tests.factories import task, template


@pytest.fixture
def mixed_graph() -> WorkflowGraph:
    """Execution graph with one edge of every kind."""
    return build_workflow_graph(
        [
            task(1, 1, "completed"),
            task(2, 2, "failed", [(1, "blocking")]),
            task(3, 3, "ready", [(2, "soft")]),
            task(4, 4, "pending", [(3, "parallel")]),
            task(5, 5, "pending"),
        ],
        "execution",
    )


class TestMermaid:
    """Mermaid flowchart output."""

    def test_header_and_nodes(self, mixed_graph: WorkflowGraph) -> None:
        lines = to_mermaid(mixed_graph).splitlines()

        assert lines[0] == "flowchart LR"
        assert '    s1["Task 1<br>approval<br>Order: 1<br>[completed]"]' in lines

    def test_arrows_per_kind(self, mixed_graph: WorkflowGraph) -> None:
        source = to_mermaid(mixed_graph)

        assert "s1 == blocking ==> s2" in source
        assert "s2 -- soft --> s3" in source
        assert "s3 -- parallel --> s4" in source
        assert "s4 -.-> s5" in source

    def test_style_lines(self, mixed_graph: WorkflowGraph) -> None:
        source = to_mermaid(mixed_graph)

        assert "style s2 fill:#ef4444,stroke:#dc2626,color:#ffffff" in source

    def test_template_nodes_have_no_status(self) -> None:
        graph = build_workflow_graph([template(1, 1, timeout_minutes=45)], "template")

        assert '["Step 1<br>validation<br>Order: 1<br>45min"]' in to_mermaid(graph)

    def test_quotes_are_escaped(self) -> None:
        graph = build_workflow_graph([template(1, 1, name='Check "credit"')], "template")

        assert "Check 'credit'" in to_mermaid(graph)

    def test_direction(self, mixed_graph: WorkflowGraph) -> None:
        assert to_mermaid(mixed_graph, direction="TD").startswith("flowchart TD")

    def test_markdown_file(self, mixed_graph: WorkflowGraph, tmp_path: Path) -> None:
        path = export_mermaid_markdown(mixed_graph, tmp_path / "docs")

        content = path.read_text(encoding="utf-8")
        assert path.name == "workflow_diagram.md"
        assert content.startswith("```mermaid\nflowchart LR")
        assert content.endswith("```\n")


class TestDot:
    """GraphViz output."""

    def test_digraph(self, mixed_graph: WorkflowGraph) -> None:
        source = to_dot(mixed_graph)

        assert source.startswith("digraph Workflow {")
        assert source.endswith("}")
        assert '"2" [label="Task 2\\napproval\\nOrder: 2\\n[failed]", fillcolor="#ef4444"' in source

    def test_edge_attributes(self, mixed_graph: WorkflowGraph) -> None:
        source = to_dot(mixed_graph)

        assert '"1" -> "2" [color="#ef4444", style=bold, label="blocking"];' in source
        assert '"4" -> "5" [color="#9ca3af", style=dashed];' in source

    def test_label_escaping(self) -> None:
        """Quotes, backslashes and line breaks in names stay inside the DOT label."""
        graph = build_workflow_graph(
            [template(1, 1, name='C:\\orders "A"\nsecond line')], "template"
        )

        node_line = next(line for line in to_dot(graph).splitlines() if line.startswith('  "1" ['))

        assert 'label="C:\\\\orders \\"A\\"\\nsecond line\\nvalidation\\nOrder: 1"' in node_line
        assert node_line.endswith("];")


class TestMermaidLineBreaks:
    """Line breaks inside names are folded in Mermaid output."""

    def test_newline_in_name(self) -> None:
        graph = build_workflow_graph([template(1, 1, name="first\nsecond")], "template")

        assert '["first second<br>validation<br>Order: 1"]' in to_mermaid(graph)


class TestExportGraph:
    """Format dispatch."""

    def test_json(self, mixed_graph: WorkflowGraph) -> None:
        data: dict[str, Any] = json.loads(export_graph(mixed_graph, "json"))

        assert len(data["nodes"]) == 5
        assert data["progress"]["failed"] == 1

    def test_text_formats(self, mixed_graph: WorkflowGraph) -> None:
        assert export_graph(mixed_graph, "mermaid") == to_mermaid(mixed_graph)
        assert export_graph(mixed_graph, "dot") == to_dot(mixed_graph)

    def test_unknown_format(self, mixed_graph: WorkflowGraph) -> None:
        with pytest.raises(ValueError, match="Unsupported output format"):
            export_graph(mixed_graph, "svg")

    def test_empty_graph(self) -> None:
        assert to_mermaid(build_workflow_graph([], "template")) == "flowchart LR"
