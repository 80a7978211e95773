"""
Flowboard data models.

This package contains the pydantic models for the ERP backend's step payloads,
the normalized step records used by the graph pipeline, and the rendered
node/edge output.
"""

# Base models
from .base import BaseModel, EdgeKind, FrozenModel, StepKind, StepStatus

# Rendered graph models
from .graph import (
    EdgeMarker,
    EdgeStyle,
    GraphEdge,
    GraphNode,
    GridCell,
    LegendEntry,
    NodeLabel,
    NodeStyle,
    Position,
    StatusStyle,
    WorkflowGraph,
    WorkflowProgress,
)

# Step models
from .step import (
    Dependency,
    ExecutionStep,
    Step,
    StepPayload,
    TaskDependency,
    TemplateDependency,
    TemplateStep,
)

__all__ = [
    "BaseModel",
    "Dependency",
    "EdgeKind",
    "EdgeMarker",
    "EdgeStyle",
    "ExecutionStep",
    "FrozenModel",
    "GraphEdge",
    "GraphNode",
    "GridCell",
    "LegendEntry",
    "NodeLabel",
    "NodeStyle",
    "Position",
    "StatusStyle",
    "Step",
    "StepKind",
    "StepPayload",
    "StepStatus",
    "TaskDependency",
    "TemplateDependency",
    "TemplateStep",
    "WorkflowGraph",
    "WorkflowProgress",
]
