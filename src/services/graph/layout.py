"""
Grid layout allocation.

Steps are placed left-to-right, top-to-bottom in sorted order into rows of
fixed capacity. Placement ignores the dependency graph entirely, so cyclic
or disconnected declarations still produce an overlap-free diagram.
"""

from collections.abc import Sequence

from pydantic import model_validator

from src.exceptions.domain import ConfigError
from src.models import FrozenModel, GraphNode, GridCell, Position, Step
from src.settings import Settings


class GridLayout(FrozenModel):
    """Grid geometry.

    Args:
        columns: Row capacity ``W``
        horizontal_spacing: Distance between the left edges of neighbouring columns
        vertical_spacing: Distance between the top edges of neighbouring rows
        margin: Offset of the first cell from the origin
        node_width: Rendered node box width
        node_height: Rendered node box height
    """

    columns: int = 3
    horizontal_spacing: int = 300
    vertical_spacing: int = 150
    margin: int = 50
    node_width: int = 250
    node_height: int = 100

    @model_validator(mode="after")
    def check_no_overlap(self) -> "GridLayout":
        if self.columns < 1:
            raise ValueError("columns must be at least 1")
        if self.horizontal_spacing < self.node_width:
            raise ValueError("horizontal_spacing must not be smaller than node_width")
        if self.vertical_spacing < self.node_height:
            raise ValueError("vertical_spacing must not be smaller than node_height")
        return self

    @classmethod
    def from_settings(cls, config: Settings) -> "GridLayout":
        """Build the layout from the grid section of the settings.

        Raises:
            ConfigError: If the configured geometry would let boxes overlap
        """
        try:
            return cls(
                columns=config.grid_columns,
                horizontal_spacing=config.horizontal_spacing,
                vertical_spacing=config.vertical_spacing,
                margin=config.layout_margin,
                node_width=config.node_width,
                node_height=config.node_height,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid grid layout settings: {e}") from e

    def cell(self, index: int) -> GridCell:
        """Cell of the ``index``-th step in sorted order (0-based)."""
        column, row = index % self.columns, index // self.columns
        return GridCell(
            index=index,
            column=column,
            row=row,
            position=Position(
                x=column * self.horizontal_spacing + self.margin,
                y=row * self.vertical_spacing + self.margin,
            ),
        )


def assign_cells(sorted_steps: Sequence[Step], layout: GridLayout) -> list[GridCell]:
    """One cell per step, aligned with ``sorted_steps``."""
    return [layout.cell(index) for index in range(len(sorted_steps))]


def center_graph(
    nodes: Sequence[GraphNode],
    viewport_width: float,
    viewport_height: float,
    layout: GridLayout | None = None,
) -> list[GraphNode]:
    """Translate nodes so their bounding box is centred in the viewport.

    Args:
        nodes: Positioned nodes
        viewport_width: Width of the drawing area
        viewport_height: Height of the drawing area
        layout: Supplies the node box size, defaults to ``GridLayout()``

    Returns:
        New node records with shifted positions
    """
    if not nodes:
        return []
    layout = layout or GridLayout()

    min_x = min(node.position.x for node in nodes)
    max_x = max(node.position.x + layout.node_width for node in nodes)
    min_y = min(node.position.y for node in nodes)
    max_y = max(node.position.y + layout.node_height for node in nodes)

    offset_x = round((viewport_width - (max_x - min_x)) / 2 - min_x)
    offset_y = round((viewport_height - (max_y - min_y)) / 2 - min_y)

    return [
        node.model_copy(
            update={"position": Position(x=node.position.x + offset_x, y=node.position.y + offset_y)}
        )
        for node in nodes
    ]
