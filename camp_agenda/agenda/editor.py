"""Editor state for the agenda builder.

Binds one camp's SessionStore to what the operator is doing: the active day
tab, the new-session draft, the session being edited or copied, the open
dialogs, the filter criteria and the view mode.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from camp_agenda.agenda.copy import CopySelection
from camp_agenda.agenda.filters import AgendaView, SessionFilter, ViewMode, project_view
from camp_agenda.agenda.notices import MutationOutcome, OutcomeKind
from camp_agenda.agenda.staff import MultiStaffSelection, SingleStaffSelection, search_staff
from camp_agenda.agenda.store import SessionStore
from camp_agenda.agenda.types import AgendaItem, SessionStatus, SessionType, StaffMember
from camp_agenda.config.settings import settings


def new_draft(day: int) -> AgendaItem:
    return AgendaItem(
        title="",
        description="",
        start_time="08:00",
        end_time="09:00",
        day=day,
        session_type=SessionType.INSTRUCTION,
        status=SessionStatus.DRAFT,
        staff_assignments=[],
    )


class AgendaEditor:
    """UI state and event handlers for one camp's agenda."""

    def __init__(
        self,
        store: SessionStore,
        *,
        settle_delay: float | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.store = store
        self.settle_delay = settings.ui_settle_delay_seconds if settle_delay is None else settle_delay
        self._sleep = sleep

        self.active_tab = 0
        self.draft = new_draft(self.active_day)
        self.selected_session: AgendaItem | None = None
        self.copy_selection: CopySelection | None = None

        self.add_dialog_open = False
        self.edit_dialog_open = False
        self.copy_dialog_open = False

        self.criteria = SessionFilter()
        self.view_mode = ViewMode.TIMELINE

    # ------------------------------------------------------------------
    # Tabs, filters, view mode
    # ------------------------------------------------------------------

    @property
    def active_day(self) -> int:
        return self.active_tab + 1

    def set_active_tab(self, tab: int) -> None:
        if tab < 0:
            raise ValueError(f"Tab index must be non-negative, got {tab}")
        self.active_tab = tab
        self.draft = self.draft.model_copy(update={"day": self.active_day})

    def set_filter(
        self,
        session_type: SessionType | str | None = "all",
        clinician_id: int | None = None,
        location_id: int | None = None,
    ) -> None:
        self.criteria = SessionFilter(session_type=session_type, clinician_id=clinician_id, location_id=location_id)

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self.view_mode = ViewMode(mode)

    def toggle_view_mode(self) -> ViewMode:
        self.view_mode = ViewMode.LIST if self.view_mode == ViewMode.TIMELINE else ViewMode.TIMELINE
        return self.view_mode

    async def current_view(self) -> AgendaView:
        """Rows for the active day under the current filter and view mode.

        Raises:
            AgendaNotLoadedError: If the agenda has not been loaded
        """
        agenda_day = self.store.day(self.active_day)
        items = agenda_day.items if agenda_day is not None else []
        return project_view(
            items,
            self.criteria,
            self.view_mode,
            clinicians=await self.store.clinicians(),
            locations=await self.store.locations(),
        )

    # ------------------------------------------------------------------
    # Draft
    # ------------------------------------------------------------------

    def open_add_dialog(self) -> None:
        self.draft = new_draft(self.active_day)
        self.add_dialog_open = True

    def update_draft(self, **changes: Any) -> AgendaItem:
        self.draft = self.draft.model_copy(update=changes)
        return self.draft

    def select_draft_clinician(self, staff_id: int | None) -> None:
        ids = SingleStaffSelection(self.draft.clinician_id).select(staff_id).selected_ids()
        self.draft = self.draft.model_copy(update={"clinician_id": ids[0] if ids else None})

    def toggle_draft_staff(self, member: StaffMember) -> None:
        current = self.draft.staff_assignments
        selection = MultiStaffSelection.of(m.id for m in current).toggle(member.id)
        known = {m.id: m for m in [*current, member]}
        self.draft = self.draft.model_copy(
            update={"staff_assignments": [known[staff_id] for staff_id in selection.selected_ids()]}
        )

    async def find_staff(self, query: str | None = None) -> list[StaffMember]:
        """Staff the draft can be assigned, narrowed by a search query."""
        return search_staff(await self.store.staff(), query)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def handle_add_session(self) -> MutationOutcome:
        """Add the draft to the active day; reset and close the dialog on success."""
        item = self.draft.model_copy(update={"day": self.active_day})
        outcome = await self.store.add_session(item)
        if outcome.ok:
            self.draft = new_draft(self.active_day)
            await self._sleep(self.settle_delay)
            self.add_dialog_open = False
        return outcome

    def handle_edit_session(self, item: AgendaItem) -> None:
        self.selected_session = item.model_copy(deep=True)
        self.edit_dialog_open = True

    def update_selected(self, **changes: Any) -> AgendaItem | None:
        if self.selected_session is not None:
            self.selected_session = self.selected_session.model_copy(update=changes)
        return self.selected_session

    async def handle_update_session(self) -> MutationOutcome:
        outcome = await self.store.update_session(self.selected_session)
        if outcome.ok:
            self.edit_dialog_open = False
            self.selected_session = None
        return outcome

    async def handle_delete_session(
        self,
        session_id: int,
        confirm: Callable[[str], bool],
    ) -> MutationOutcome:
        return await self.store.delete_session(session_id, confirm)

    def handle_copy_session(self, item: AgendaItem) -> CopySelection:
        self.selected_session = item
        self.copy_selection = CopySelection.for_session(item, self.store.days)
        self.copy_dialog_open = True
        return self.copy_selection

    def toggle_copy_day(self, day: int) -> CopySelection | None:
        if self.copy_selection is not None:
            self.copy_selection = self.copy_selection.toggle(day)
        return self.copy_selection

    async def handle_copy_to_days(self) -> MutationOutcome:
        if self.copy_selection is None or self.copy_selection.source.id is None:
            logger.warning("[AGENDA] Copy requested without a source session")
            return MutationOutcome(OutcomeKind.CANCELLED)
        outcome = await self.store.copy_session(self.copy_selection.source.id, self.copy_selection.target_days())
        if outcome.ok:
            self.copy_dialog_open = False
            self.copy_selection = None
            self.selected_session = None
        return outcome

    async def handle_export_agenda(self) -> MutationOutcome:
        return await self.store.export_agenda()
