from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil import parser as dtparser

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("vikunja.projects", "vikunja.tasks7d", "vikunja.tasksOverdue", "vikunja.tasksInProgress")

# Vikunja reports "no due date" as the zero time
_NO_DUE_DATE = "0001-01-01"


def _due(task: dict) -> datetime | None:
    due = task.get("dueDate")
    is_default = task.get("dueDateIsDefault")
    if is_default is None:
        is_default = not due or str(due).startswith(_NO_DUE_DATE)
    if is_default or not due:
        return None
    dt = dtparser.isoparse(due)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _in_progress(task: dict) -> bool:
    if "inProgress" in task:
        return bool(task["inProgress"])
    return to_number(task.get("percentDone")) > 0


def normalize(
    payloads: dict[str, Payload],
    spec: WidgetSpec,
    selected: tuple[str, ...],
    now: datetime | None = None,
) -> WidgetResult:
    now = now or datetime.now(timezone.utc)
    week = now + timedelta(days=7)
    projects = payloads["projects"].data
    tasks = payloads["tasks"].data
    due = [d for d in (_due(t) for t in tasks) if d is not None]
    return ready(
        selected,
        # negative ids are saved filters, not projects
        NormalizedField("vikunja.projects", sum(1 for p in projects if to_number(p.get("id")) > 0)),
        NormalizedField("vikunja.tasks7d", sum(1 for d in due if d <= week)),
        NormalizedField("vikunja.tasksOverdue", sum(1 for d in due if d <= now)),
        NormalizedField("vikunja.tasksInProgress", sum(1 for t in tasks if _in_progress(t))),
    )


widget = WidgetDefinition(
    kind=WidgetKind.VIKUNJA,
    api="{url}/api/v1/{endpoint}",
    mappings={
        "projects": Mapping("projects"),
        "tasks": Mapping("tasks/all", params={"filter": "done=false"}),
    },
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
)
