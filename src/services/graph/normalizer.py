"""
Step normalization.

Reads a list of template steps or execution steps (never mixed) and produces
``Step`` records tagged with the mode they were read in. Input order is
preserved; sorting is the resolver's job.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeAlias

from pydantic import ValidationError as PydanticValidationError

from src.exceptions.domain import ValidationError
from src.models import Dependency, ExecutionStep, Step, StepKind, TemplateStep
from src.utils.logger import logger

RawStep: TypeAlias = TemplateStep | ExecutionStep | Mapping[str, Any]


def as_step_kind(mode: StepKind | str) -> StepKind:
    """Coerce a mode flag such as ``"template"`` into a ``StepKind``."""
    return mode if isinstance(mode, StepKind) else StepKind(mode)


def _from_template(item: TemplateStep) -> Step:
    return Step(
        kind=StepKind.template,
        id=item.id,
        name=item.name,
        task_type=item.task_type,
        order=item.order,
        timeout_minutes=item.timeout_minutes,
        dependencies=tuple(
            Dependency(depends_on_id=dep.depends_on_template_id, dependency_type=dep.dependency_type)
            for dep in item.dependencies
        ),
    )


def _from_execution(item: ExecutionStep) -> Step:
    return Step(
        kind=StepKind.execution,
        id=item.id,
        name=item.name,
        task_type=item.task_type,
        order=item.order,
        timeout_minutes=item.timeout_minutes,
        status=item.status,
        dependencies=tuple(
            Dependency(depends_on_id=dep.depends_on_task_id, dependency_type=dep.dependency_type)
            for dep in item.dependencies
        ),
    )


def parse_payloads(items: Iterable[RawStep], mode: StepKind | str) -> list[TemplateStep | ExecutionStep]:
    """Validate raw backend dictionaries into the payload model for ``mode``.

    Already-parsed payload models are passed through. This is the boundary
    used by the API and CLI; the pipeline itself never validates.

    Raises:
        ValidationError: If an item cannot be read as the mode's step shape
    """
    kind = as_step_kind(mode)
    model = TemplateStep if kind is StepKind.template else ExecutionStep
    parsed: list[TemplateStep | ExecutionStep] = []
    for position, item in enumerate(items):
        if isinstance(item, model):
            parsed.append(item)
            continue
        try:
            parsed.append(model.model_validate(item))
        except PydanticValidationError as e:
            raise ValidationError(
                f"Step #{position} is not a valid {kind.value} step",
                errors=e.errors(include_url=False, include_context=False),
            ) from e
    return parsed


def normalize_steps(items: Iterable[RawStep], mode: StepKind | str) -> list[Step]:
    """Produce normalized steps from template or execution payloads.

    The mode flag decides which shape is read. Feeding the other shape is the
    caller's mistake and is not checked beyond what parsing catches.

    Args:
        items: Backend step payloads, as models or plain dictionaries
        mode: ``template`` or ``execution``

    Returns:
        Normalized steps in input order
    """
    kind = as_step_kind(mode)
    payloads = parse_payloads(list(items), kind)

    if kind is StepKind.template:
        steps = [_from_template(item) for item in payloads]  # type: ignore[arg-type]
    else:
        steps = [_from_execution(item) for item in payloads]  # type: ignore[arg-type]

    seen: set[int] = set()
    for step in steps:
        if step.id in seen:
            logger.debug(f"Duplicate step id {step.id} in {kind.value} input")
        seen.add(step.id)

    return steps
