"""Filtering and view projection over one day's sessions.

Everything here is pure: inputs are never mutated and the same criteria
always produce the same rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from camp_agenda.agenda.types import (
    AgendaItem,
    Clinician,
    Location,
    SessionType,
    session_type_display_name,
    status_label,
)

ALL_TYPES = "all"


class ViewMode(str, Enum):
    TIMELINE = "timeline"
    LIST = "list"


@dataclass(frozen=True)
class SessionFilter:
    """Filter criteria. "all" and None/0 ids let every session through."""

    session_type: SessionType | str | None = ALL_TYPES
    clinician_id: int | None = None
    location_id: int | None = None


def _start_key(item: AgendaItem) -> str:
    return item.start_time or ""


def _matches(item: AgendaItem, criteria: SessionFilter) -> bool:
    session_type = criteria.session_type
    if isinstance(session_type, SessionType):
        session_type = session_type.value
    if session_type and session_type != ALL_TYPES and item.session_type != session_type:
        return False
    if criteria.clinician_id and item.clinician_id != criteria.clinician_id:
        return False
    if criteria.location_id and item.location_id != criteria.location_id:
        return False
    return True


def filter_sessions(
    items: Iterable[AgendaItem | None],
    criteria: SessionFilter | None = None,
) -> list[AgendaItem]:
    """Return the matching sessions sorted by start time.

    None entries are dropped. The sort is stable, so sessions sharing a
    start time keep their source order.

    Args:
        items: Sessions of one day, in any order
        criteria: Filter criteria (defaults to pass-through)

    Returns:
        New list of matching sessions, ascending by startTime
    """
    criteria = criteria or SessionFilter()
    matched = [item for item in items if item is not None and _matches(item, criteria)]
    return sorted(matched, key=_start_key)


@dataclass(frozen=True)
class SessionRow:
    """Display row for one session."""

    session_id: int | None
    time_range: str
    title: str
    type_label: str
    location: str | None
    clinician: str | None
    staff: tuple[str, ...] = ()
    status: str | None = None


@dataclass(frozen=True)
class AgendaView:
    mode: ViewMode
    rows: tuple[SessionRow, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def columns(self) -> tuple[str, ...]:
        base = ("Time", "Title", "Type", "Location", "Clinician", "Staff")
        if self.mode == ViewMode.LIST:
            return (*base, "Status")
        return base


def project_view(
    items: Sequence[AgendaItem | None],
    criteria: SessionFilter | None = None,
    mode: ViewMode = ViewMode.TIMELINE,
    *,
    clinicians: Sequence[Clinician] = (),
    locations: Sequence[Location] = (),
) -> AgendaView:
    """Derive the rows for a view mode from the raw sessions."""
    clinician_names = {c.id: c.name for c in clinicians}
    location_names = {loc.id: loc.name for loc in locations}

    rows = []
    for item in filter_sessions(items, criteria):
        rows.append(
            SessionRow(
                session_id=item.id,
                time_range=f"{item.start_time or ''} - {item.end_time or ''}",
                title=item.title,
                type_label=session_type_display_name(item.session_type),
                location=location_names.get(item.location_id) if item.location_id else None,
                clinician=clinician_names.get(item.clinician_id) if item.clinician_id else None,
                staff=tuple(member.name for member in item.staff_assignments),
                status=status_label(item.status) if mode == ViewMode.LIST else None,
            )
        )
    return AgendaView(mode=mode, rows=tuple(rows))
