"""Staff pickers: a single primary clinician, or a set of additional staff.

Both variants share the StaffSelection interface and are immutable; every
change returns a new selection.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol

from camp_agenda.agenda.types import StaffMember


class StaffSelection(Protocol):
    def selected_ids(self) -> list[int]: ...

    def toggle(self, staff_id: int) -> StaffSelection: ...


@dataclass(frozen=True)
class SingleStaffSelection:
    """At most one staff member. Selecting another one replaces it."""

    staff_id: int | None = None

    def selected_ids(self) -> list[int]:
        return [] if self.staff_id is None else [self.staff_id]

    def toggle(self, staff_id: int) -> SingleStaffSelection:
        if self.staff_id == staff_id:
            return SingleStaffSelection()
        return SingleStaffSelection(staff_id)

    def select(self, staff_id: int | None) -> SingleStaffSelection:
        return SingleStaffSelection(staff_id)

    def clear(self) -> SingleStaffSelection:
        return SingleStaffSelection()


@dataclass(frozen=True)
class MultiStaffSelection:
    """Any number of staff members, kept in selection order."""

    staff_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, staff_ids: Iterable[int]) -> MultiStaffSelection:
        return cls(tuple(dict.fromkeys(staff_ids)))

    def selected_ids(self) -> list[int]:
        return list(self.staff_ids)

    def toggle(self, staff_id: int) -> MultiStaffSelection:
        if staff_id in self.staff_ids:
            return replace(self, staff_ids=tuple(i for i in self.staff_ids if i != staff_id))
        return replace(self, staff_ids=(*self.staff_ids, staff_id))

    def clear(self) -> MultiStaffSelection:
        return MultiStaffSelection()


def search_staff(staff: Sequence[StaffMember], query: str | None) -> list[StaffMember]:
    """Case-insensitive substring match on name, role or email."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(staff)
    return [
        member
        for member in staff
        if needle in member.name.lower()
        or needle in (member.role or "").lower()
        or needle in (member.email or "").lower()
    ]


def resolve_staff(staff: Sequence[StaffMember], selection: StaffSelection) -> list[StaffMember]:
    """Map a selection back to StaffMember objects, skipping unknown ids."""
    by_id = {member.id: member for member in staff}
    return [by_id[staff_id] for staff_id in selection.selected_ids() if staff_id in by_id]
