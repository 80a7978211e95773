"""
Status and style classification.

Pure lookups from execution status, task type and edge kind to visual
styling. Every lookup is total: values it does not recognise get the
neutral default, never an exception. Task types in particular are
configured on the backend, so the palette can never be exhaustive.
"""

import enum

from src.models import EdgeKind, EdgeStyle, LegendEntry, StatusStyle, StepStatus

DEFAULT_STATUS_STYLE = StatusStyle(fill="#e5e7eb", border="#9ca3af", text_color="#374151")

STATUS_STYLES: dict[str, StatusStyle] = {
    StepStatus.completed.value: StatusStyle(fill="#10b981", border="#059669", text_color="#ffffff"),
    StepStatus.in_progress.value: StatusStyle(fill="#f59e0b", border="#d97706", text_color="#ffffff"),
    StepStatus.ready.value: StatusStyle(fill="#3b82f6", border="#2563eb", text_color="#ffffff"),
    StepStatus.failed.value: StatusStyle(fill="#ef4444", border="#dc2626", text_color="#ffffff"),
    StepStatus.cancelled.value: StatusStyle(fill="#6b7280", border="#4b5563", text_color="#ffffff"),
    StepStatus.pending.value: DEFAULT_STATUS_STYLE,
}

DEFAULT_STATUS_ICON = "circle"

STATUS_ICONS: dict[str, str] = {
    StepStatus.completed.value: "check-circle",
    StepStatus.in_progress.value: "clock",
    StepStatus.failed.value: "x-circle",
    StepStatus.ready.value: "alert-circle",
}

DEFAULT_TASK_TYPE_COLOR = "#6b7280"

TASK_TYPE_COLORS: dict[str, str] = {
    "creation": "#8b5cf6",
    "validation": "#3b82f6",
    "conversion": "#06b6d4",
    "approval": "#10b981",
    "dispatch": "#f59e0b",
    "preparation": "#ec4899",
    "delivery": "#14b8a6",
    "control": "#6366f1",
    "notification": "#a855f7",
    "processing": "#64748b",
}

EDGE_STYLES: dict[EdgeKind, EdgeStyle] = {
    EdgeKind.blocking: EdgeStyle(stroke="#ef4444", animated=True),
    EdgeKind.soft: EdgeStyle(stroke="#f59e0b"),
    EdgeKind.parallel: EdgeStyle(stroke="#10b981"),
    EdgeKind.sequential: EdgeStyle(stroke="#9ca3af", dashed=True, stroke_dasharray="5,5"),
}

# Template-mode nodes have no status to colour the minimap with
TEMPLATE_MINIMAP_COLOR = "#e5e7eb"


def _lookup_key(value: object) -> str | None:
    if isinstance(value, enum.Enum):
        value = value.value
    return value if isinstance(value, str) else None


def style_for_status(status: str | None = None) -> StatusStyle:
    """Fill, border and text colours for a step status.

    ``pending``, a missing status (template steps) and unknown values all
    get the neutral grey default.
    """
    return STATUS_STYLES.get(_lookup_key(status), DEFAULT_STATUS_STYLE)


def icon_for_status(status: str | None = None) -> str:
    """Icon key for a step status, ``circle`` when unknown or absent."""
    return STATUS_ICONS.get(_lookup_key(status), DEFAULT_STATUS_ICON)


def color_for_task_type(task_type: str | None) -> str:
    """Palette colour for a task type; unseen types share one default colour."""
    return TASK_TYPE_COLORS.get(_lookup_key(task_type), DEFAULT_TASK_TYPE_COLOR)


def style_for_dependency_kind(kind: EdgeKind | str | None) -> EdgeStyle:
    """Stroke style for an edge kind.

    Unrecognised kinds are styled as ``parallel``, the least alarming
    rendering, matching how the resolver reads unknown dependency types.
    """
    key = _lookup_key(kind)
    for edge_kind, style in EDGE_STYLES.items():
        if edge_kind.value == key:
            return style
    return EDGE_STYLES[EdgeKind.parallel]


def legend() -> list[LegendEntry]:
    """Legend rows for the four edge kinds, in display order."""
    return [
        LegendEntry(kind=kind, label=kind.value.capitalize(), color=style.stroke, dashed=style.dashed)
        for kind, style in EDGE_STYLES.items()
    ]
