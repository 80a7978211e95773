"""
Workflow graph pipeline.

normalize -> sort -> resolve edges / allocate grid cells -> assemble.

``build_workflow_graph`` recomputes everything from scratch. Hosts that
re-render the same input repeatedly keep a ``WorkflowGraphMemo``, which
caches rendered graphs by the content of the normalized input and the mode.
"""

from collections.abc import Iterable

from cachetools import LRUCache
from cachetools.keys import hashkey

from src.models import Step, StepKind, WorkflowGraph
from src.utils.logger import logger

from .assembler import assemble
from .layout import GridLayout, assign_cells
from .normalizer import RawStep, as_step_kind, normalize_steps
from .progress import summarize_progress
from .resolver import resolve_edges, sort_steps

EMPTY_MESSAGES = {
    StepKind.template: "Create templates to visualize the workflow",
    StepKind.execution: "No tasks have been created yet",
}


def render_steps(steps: list[Step], mode: StepKind, layout: GridLayout) -> WorkflowGraph:
    """Render already-normalized steps."""
    if not steps:
        return WorkflowGraph(mode=mode, empty_message=EMPTY_MESSAGES[mode])

    ordered = sort_steps(steps)
    edges = resolve_edges(ordered)
    cells = assign_cells(ordered, layout)
    nodes, graph_edges = assemble(ordered, cells, edges, layout)

    return WorkflowGraph(
        mode=mode,
        nodes=tuple(nodes),
        edges=tuple(graph_edges),
        progress=summarize_progress(ordered) if mode is StepKind.execution else None,
    )


def build_workflow_graph(
    items: Iterable[RawStep],
    mode: StepKind | str,
    layout: GridLayout | None = None,
) -> WorkflowGraph:
    """Build the render graph for a template or execution step list.

    Args:
        items: Template steps or execution steps, matching ``mode``
        mode: ``template`` or ``execution``
        layout: Grid geometry, defaults to ``GridLayout()``

    Returns:
        Nodes, edges and, in execution mode, a progress summary
    """
    kind = as_step_kind(mode)
    return render_steps(normalize_steps(items, kind), kind, layout or GridLayout())


class WorkflowGraphMemo:
    """Per-host cache of rendered graphs.

    The key is ``(mode, normalized steps)``; normalized steps are frozen
    models, so two inputs with the same content share one entry whatever
    list object they arrive in. With ``maxsize=1`` this behaves like a
    single memoized value that is replaced whenever the input changes.
    """

    def __init__(self, layout: GridLayout | None = None, maxsize: int = 1):
        self.layout = layout or GridLayout()
        self._cache: LRUCache = LRUCache(maxsize=maxsize)
        self.hits = 0
        self.misses = 0

    def get(self, items: Iterable[RawStep], mode: StepKind | str) -> WorkflowGraph:
        """Rendered graph for ``items`` in ``mode``, from cache when unchanged."""
        kind = as_step_kind(mode)
        steps = normalize_steps(items, kind)
        key = hashkey(kind, tuple(steps))

        graph: WorkflowGraph | None = self._cache.get(key)
        if graph is not None:
            self.hits += 1
            logger.debug(f"Graph memo hit ({kind.value}, {len(steps)} steps)")
            return graph

        self.misses += 1
        logger.debug(f"Graph memo miss ({kind.value}, {len(steps)} steps)")
        graph = render_steps(steps, kind, self.layout)
        self._cache[key] = graph
        return graph

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
