"""Workflow progress summary for execution-mode steps."""

from collections import Counter
from collections.abc import Sequence

from src.models import Step, StepStatus, WorkflowProgress

_COUNTED = {status.value for status in StepStatus}


def summarize_progress(steps: Sequence[Step]) -> WorkflowProgress:
    """Count steps per status and compute the completed percentage.

    Unknown or missing statuses count as ``pending``, the same way they are
    styled.
    """
    counts: Counter[str] = Counter(
        step.status if step.status in _COUNTED else StepStatus.pending.value for step in steps
    )
    total = len(steps)
    completed = counts[StepStatus.completed.value]
    return WorkflowProgress(
        total=total,
        pending=counts[StepStatus.pending.value],
        ready=counts[StepStatus.ready.value],
        in_progress=counts[StepStatus.in_progress.value],
        completed=completed,
        failed=counts[StepStatus.failed.value],
        cancelled=counts[StepStatus.cancelled.value],
        progress_percentage=round(completed / total * 100, 1) if total else 0.0,
    )
