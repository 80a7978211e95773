"""
Step models.

Two groups live here: the payload shapes the ERP backend returns for
workflow templates and for run-time tasks, and the single normalized
``Step`` record every later pipeline stage reads.
"""

from typing import Any

from pydantic import Field, field_validator

from .base import BaseModel, FrozenModel, StepKind


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _none_to_blank(value: Any) -> Any:
    return "" if value is None else value


def _to_str_or_none(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


class TemplateDependency(BaseModel):
    """Dependency declared between two workflow task templates."""

    depends_on_template_id: int | None = None
    dependency_type: str | None = None

    @field_validator("dependency_type", mode="before")
    @classmethod
    def stringify_type(cls, value: Any) -> Any:
        return _to_str_or_none(value)


class TaskDependency(BaseModel):
    """Dependency declared between two run-time workflow tasks."""

    depends_on_task_id: int | None = None
    dependency_type: str | None = None

    @field_validator("dependency_type", mode="before")
    @classmethod
    def stringify_type(cls, value: Any) -> Any:
        return _to_str_or_none(value)


class StepPayload(BaseModel):
    """Fields shared by both backend step shapes."""

    id: int
    name: str = ""
    task_type: str = ""
    order: int
    timeout_minutes: int | None = None

    @field_validator("timeout_minutes", mode="before")
    @classmethod
    def blank_timeout(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("name", "task_type", mode="before")
    @classmethod
    def null_text(cls, value: Any) -> Any:
        return _none_to_blank(value)


class TemplateStep(StepPayload):
    """Design-time step as returned by ``/workflow-templates/{id}/templates``."""

    dependencies: list[TemplateDependency] = Field(default_factory=list)

    @field_validator("dependencies", mode="before")
    @classmethod
    def null_dependencies(cls, value: Any) -> Any:
        return _none_to_list(value)


class ExecutionStep(StepPayload):
    """Run-time task as returned inside a workflow progress payload."""

    status: str | None = None
    dependencies: list[TaskDependency] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def stringify_status(cls, value: Any) -> Any:
        return _to_str_or_none(value)

    @field_validator("dependencies", mode="before")
    @classmethod
    def null_dependencies(cls, value: Any) -> Any:
        return _none_to_list(value)


class Dependency(FrozenModel):
    """Normalized dependency: the step carrying it depends on ``depends_on_id``."""

    depends_on_id: int | None
    dependency_type: str | None = None


class Step(FrozenModel):
    """Normalized workflow step.

    ``kind`` is fixed once during normalization so downstream stages never
    probe for the presence of ``status``. ``status`` is always None for
    template steps.
    """

    kind: StepKind
    id: int
    name: str = ""
    task_type: str = ""
    order: int
    timeout_minutes: int | None = None
    status: str | None = None
    dependencies: tuple[Dependency, ...] = ()

    @property
    def is_execution(self) -> bool:
        return self.kind is StepKind.execution
