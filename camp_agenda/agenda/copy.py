"""Copy-to-days selection for one source session."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from camp_agenda.agenda.notices import Notice
from camp_agenda.agenda.types import AgendaDay, AgendaItem

EMPTY_SELECTION_NOTICE = Notice(
    "Error copying session",
    "Please select at least one day to copy to.",
    "destructive",
)


@dataclass(frozen=True)
class CopySelection:
    """Target days picked for copying a session.

    The source session's own day is never a candidate. Overlaps with
    sessions already on the target days are allowed.
    """

    source: AgendaItem
    available_days: tuple[int, ...] = ()
    selected: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def for_session(cls, source: AgendaItem, days: Sequence[AgendaDay]) -> CopySelection:
        candidates = tuple(day.day for day in days if day.day != source.day)
        return cls(source=source, available_days=candidates)

    def toggle(self, day: int) -> CopySelection:
        if day not in self.available_days:
            return self
        if day in self.selected:
            return replace(self, selected=self.selected - {day})
        return replace(self, selected=self.selected | {day})

    def target_days(self) -> list[int]:
        return sorted(self.selected)

    @property
    def is_empty(self) -> bool:
        return not self.selected

