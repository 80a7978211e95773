"""
Base models for Flowboard.

This module provides the pydantic base classes and the small enumerations
shared by the step and graph models.
"""

import enum

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict


class BaseModel(PydanticBaseModel):
    """Base model for backend payloads; fields the backend adds are ignored."""

    model_config = ConfigDict(extra="ignore")


class FrozenModel(PydanticBaseModel):
    """Immutable, hashable model used for pipeline records and rendered output."""

    model_config = ConfigDict(frozen=True)


class StepKind(str, enum.Enum):
    """Which of the two step shapes a record was read from."""

    template = "template"
    execution = "execution"


class StepStatus(str, enum.Enum):
    """Execution statuses the backend is known to report.

    Step records keep status as a plain string; this enumeration only names
    the values the style lookups recognise.
    """

    pending = "pending"
    ready = "ready"
    in_progress = "in_progress"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


class EdgeKind(str, enum.Enum):
    """Rendering kind of an edge: the three declared kinds plus the synthetic one."""

    blocking = "blocking"
    soft = "soft"
    parallel = "parallel"
    sequential = "sequential"
