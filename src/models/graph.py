"""
Rendered graph models.

These are the node and edge records handed to the drawing surface. They are
frozen so a memoized graph can be shared between callers without anyone
mutating it in place.
"""

from .base import EdgeKind, FrozenModel, StepKind


class Position(FrozenModel):
    """Top-left corner of a node box, in surface coordinates."""

    x: int
    y: int


class GridCell(FrozenModel):
    """Row/column slot assigned to a step by the grid allocator."""

    index: int
    column: int
    row: int
    position: Position


class StatusStyle(FrozenModel):
    """Colours derived from a step's execution status."""

    fill: str
    border: str
    text_color: str


class EdgeStyle(FrozenModel):
    """Stroke settings derived from an edge's dependency kind."""

    stroke: str
    stroke_width: int = 2
    dashed: bool = False
    stroke_dasharray: str | None = None
    animated: bool = False


class NodeLabel(FrozenModel):
    """Content shown inside a node box."""

    name: str
    task_type: str
    task_type_color: str
    icon: str
    order: int
    timeout_minutes: int | None = None
    timeout_text: str | None = None
    # Only execution steps carry a status pill
    show_status: bool = False
    status: str | None = None
    status_style: StatusStyle | None = None


class NodeStyle(FrozenModel):
    """Box styling for a node."""

    background: str = "#ffffff"
    border: str
    border_color: str
    border_radius: int = 8
    width: int
    fill: str
    text_color: str


class GraphNode(FrozenModel):
    id: str
    position: Position
    label: NodeLabel
    style: NodeStyle
    minimap_color: str
    type: str = "default"
    source_position: str = "right"
    target_position: str = "left"


class EdgeMarker(FrozenModel):
    type: str = "arrowclosed"
    color: str


class GraphEdge(FrozenModel):
    id: str
    source: str
    target: str
    kind: EdgeKind
    style: EdgeStyle
    animated: bool
    marker_end: EdgeMarker
    label: str | None = None
    label_color: str | None = None
    type: str = "smoothstep"


class LegendEntry(FrozenModel):
    kind: EdgeKind
    label: str
    color: str
    dashed: bool


class WorkflowProgress(FrozenModel):
    """Status counts for an execution-mode step list."""

    total: int = 0
    pending: int = 0
    ready: int = 0
    in_progress: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0
    progress_percentage: float = 0.0


class WorkflowGraph(FrozenModel):
    """Complete render output for one step list in one mode."""

    mode: StepKind
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    progress: WorkflowProgress | None = None
    empty_message: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.nodes
