"""
Dependency resolution.

Turns sorted steps into the incoming-edge set of each step: the declared
dependencies that point at a known step, or, when none survive, one
sequential edge from the step right before it in sort order.
"""

from collections.abc import Iterable, Sequence
from operator import attrgetter

from src.models import EdgeKind, FrozenModel, Step
from src.utils.logger import logger

DECLARED_KINDS = (EdgeKind.blocking, EdgeKind.soft, EdgeKind.parallel)


class ResolvedEdge(FrozenModel):
    """Directed edge ``source -> target`` between two step ids."""

    source: int
    target: int
    kind: EdgeKind

    @property
    def is_fallback(self) -> bool:
        return self.kind is EdgeKind.sequential


def sort_steps(steps: Iterable[Step]) -> list[Step]:
    """Sort steps by ``order``; ties keep their input order."""
    return sorted(steps, key=attrgetter("order"))


def dependency_kind(value: str | EdgeKind | None) -> EdgeKind:
    """Map a declared dependency type onto an edge kind.

    Anything other than ``blocking``/``soft``/``parallel`` reads as
    ``parallel``. ``sequential`` is reserved for synthetic edges and is not
    accepted from input either.
    """
    if isinstance(value, EdgeKind):
        value = value.value
    for kind in DECLARED_KINDS:
        if value == kind.value:
            return kind
    return EdgeKind.parallel


def incoming_edges(step: Step, known_ids: set[int]) -> list[ResolvedEdge]:
    """Declared edges into ``step`` whose source is a known step id."""
    edges = []
    for dep in step.dependencies:
        if dep.depends_on_id is None or dep.depends_on_id not in known_ids:
            logger.debug(f"Dropping orphan dependency {dep.depends_on_id} -> {step.id}")
            continue
        edges.append(
            ResolvedEdge(
                source=dep.depends_on_id,
                target=step.id,
                kind=dependency_kind(dep.dependency_type),
            )
        )
    return edges


def resolve_edges(sorted_steps: Sequence[Step]) -> list[ResolvedEdge]:
    """Resolve the edge set for steps already sorted by ``sort_steps``.

    Args:
        sorted_steps: Normalized steps in ascending ``order``

    Returns:
        Edges grouped by target, targets in sorted order, declared edges in
        declaration order. Duplicate declarations are kept.
    """
    known_ids = {step.id for step in sorted_steps}
    edges: list[ResolvedEdge] = []

    for index, step in enumerate(sorted_steps):
        declared = incoming_edges(step, known_ids)
        if declared:
            edges.extend(declared)
        elif index > 0:
            previous = sorted_steps[index - 1]
            edges.append(ResolvedEdge(source=previous.id, target=step.id, kind=EdgeKind.sequential))

    return edges
