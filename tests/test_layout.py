"""Unit tests for grid layout allocation and viewport centering."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.exceptions.domain import ConfigError
from src.models import Position
from src.services.graph import (
    GridLayout,
    assign_cells,
    build_workflow_graph,
    center_graph,
    normalize_steps,
    sort_steps,
)
from src.settings import Settings
from tests.factories import template


class TestGridCells:
    """Cells are filled left-to-right, top-to-bottom."""

    def test_first_row_then_wrap(self, layout: GridLayout) -> None:
        """With three columns, index 3 starts the second row."""
        cells = [layout.cell(index) for index in range(4)]

        assert [(cell.column, cell.row) for cell in cells] == [(0, 0), (1, 0), (2, 0), (0, 1)]

    def test_pixel_positions(self, layout: GridLayout) -> None:
        assert layout.cell(0).position == Position(x=50, y=50)
        assert layout.cell(2).position == Position(x=650, y=50)
        assert layout.cell(4).position == Position(x=350, y=200)

    def test_custom_geometry(self) -> None:
        layout = GridLayout(columns=2, horizontal_spacing=400, vertical_spacing=200, margin=10)

        assert layout.cell(3).position == Position(x=410, y=210)

    def test_single_column(self) -> None:
        layout = GridLayout(columns=1)

        assert [layout.cell(i).row for i in range(3)] == [0, 1, 2]

    def test_no_overlap(self, layout: GridLayout) -> None:
        """Node boxes of distinct cells never intersect."""
        boxes = [
            (c.position.x, c.position.y, c.position.x + layout.node_width, c.position.y + layout.node_height)
            for c in (layout.cell(i) for i in range(12))
        ]

        for i, a in enumerate(boxes):
            for b in boxes[i + 1 :]:
                assert a[2] <= b[0] or b[2] <= a[0] or a[3] <= b[1] or b[3] <= a[1]

    def test_assign_cells_follows_sorted_order(self, layout: GridLayout) -> None:
        steps = sort_steps(normalize_steps([template(7, 3), template(8, 1), template(9, 2)], "template"))

        cells = assign_cells(steps, layout)

        assert [step.id for step in steps] == [8, 9, 7]
        assert [cell.index for cell in cells] == [0, 1, 2]

    def test_placement_ignores_dependencies(self, layout: GridLayout) -> None:
        """Adding dependencies moves edges, never nodes."""
        plain = build_workflow_graph([template(1, 1), template(2, 2), template(3, 3)], "template", layout)
        linked = build_workflow_graph(
            [template(1, 1, [(3, "blocking")]), template(2, 2), template(3, 3, [(1, "soft")])],
            "template",
            layout,
        )

        assert [n.position for n in plain.nodes] == [n.position for n in linked.nodes]


class TestLayoutValidation:
    """Geometry that would let boxes overlap is rejected."""

    def test_spacing_smaller_than_node(self) -> None:
        with pytest.raises(PydanticValidationError):
            GridLayout(horizontal_spacing=200, node_width=250)

    def test_zero_columns(self) -> None:
        with pytest.raises(PydanticValidationError):
            GridLayout(columns=0)

    def test_from_settings(self) -> None:
        layout = GridLayout.from_settings(Settings(grid_columns=4, layout_margin=0))

        assert layout.columns == 4
        assert layout.cell(0).position == Position(x=0, y=0)

    def test_from_invalid_settings(self) -> None:
        with pytest.raises(ConfigError):
            GridLayout.from_settings(Settings(vertical_spacing=50))


class TestCenterGraph:
    """Translating a laid-out graph into the middle of a viewport."""

    def test_single_node(self, layout: GridLayout) -> None:
        graph = build_workflow_graph([template(1, 1)], "template", layout)

        centered = center_graph(graph.nodes, 1000, 600, layout)

        assert centered[0].position == Position(x=375, y=250)

    def test_relative_positions_are_kept(self, layout: GridLayout) -> None:
        graph = build_workflow_graph([template(i, i) for i in range(1, 5)], "template", layout)

        centered = center_graph(graph.nodes, 2000, 1000, layout)

        dx = centered[0].position.x - graph.nodes[0].position.x
        dy = centered[0].position.y - graph.nodes[0].position.y
        for before, after in zip(graph.nodes, centered, strict=True):
            assert after.position.x - before.position.x == dx
            assert after.position.y - before.position.y == dy
            assert after.id == before.id

    def test_bounding_box_is_centred(self, layout: GridLayout) -> None:
        graph = build_workflow_graph([template(i, i) for i in range(1, 4)], "template", layout)

        centered = center_graph(graph.nodes, 1200, 400)

        left = min(n.position.x for n in centered)
        right = max(n.position.x + layout.node_width for n in centered)
        assert left == 1200 - right

    def test_input_nodes_untouched(self, layout: GridLayout) -> None:
        graph = build_workflow_graph([template(1, 1)], "template", layout)

        center_graph(graph.nodes, 1000, 600)

        assert graph.nodes[0].position == Position(x=50, y=50)

    def test_empty(self) -> None:
        assert center_graph([], 800, 600) == []
