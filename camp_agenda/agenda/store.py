"""Session store: client-side state of one camp's agenda.

The store is the single source of truth for the agenda UI. It never patches
its collection locally; every successful mutation invalidates the cached
agenda and camp record and re-fetches from the service.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger

from camp_agenda.agenda.cache import (
    QueryCache,
    agenda_key,
    camp_key,
    clinicians_key,
    locations_key,
    staff_key,
)
from camp_agenda.agenda.copy import EMPTY_SELECTION_NOTICE
from camp_agenda.agenda.errors import AgendaNotLoadedError, GatewayError
from camp_agenda.agenda.export import build_agenda_csv, count_sessions, write_export
from camp_agenda.agenda.gateway import AgendaGateway
from camp_agenda.agenda.notices import MutationOutcome, Notice, NoticeLog, Notifier, OutcomeKind
from camp_agenda.agenda.types import AgendaDay, AgendaItem, Camp, Clinician, Location, StaffMember
from camp_agenda.agenda.validator import validate_new_session, validate_session_update
from camp_agenda.config.settings import settings

T = TypeVar("T")

SESSION_ADDED = Notice("Session added", "The session has been added to the agenda.")
SESSION_UPDATED = Notice("Session updated", "The session has been updated successfully.")
SESSION_DELETED = Notice("Session deleted", "The session has been removed from the agenda.")
SESSION_COPIED = Notice("Session copied", "The session has been copied to selected days.")
NO_AGENDA_ITEMS = Notice("Nothing to export", "There are no agenda items to export.")
NO_SESSIONS = Notice("Nothing to export", "There are no sessions in the agenda to export.")

# Service message for a DELETE on a session id that no longer exists
SESSION_NOT_FOUND = "Agenda item not found"


class CollectionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class MutationKind(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    COPY = "copy"
    EXPORT = "export"


class SessionStore:
    """Agenda days and sessions for one camp, backed by a query cache."""

    def __init__(
        self,
        camp_id: int,
        gateway: AgendaGateway,
        *,
        cache: QueryCache | None = None,
        notifier: Notifier | None = None,
        export_dir: str | Path | None = None,
    ) -> None:
        self.camp_id = camp_id
        self._gateway = gateway
        self._cache = cache if cache is not None else QueryCache()
        self._notifier = notifier if notifier is not None else NoticeLog()
        self._export_dir = export_dir
        self._state = CollectionState.IDLE
        self._days: list[AgendaDay] = []
        self._pending: set[MutationKind] = set()
        self.last_error: str | None = None

    # ------------------------------------------------------------------
    # Collection state
    # ------------------------------------------------------------------

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state == CollectionState.LOADED

    @property
    def days(self) -> list[AgendaDay]:
        """Loaded agenda days.

        Raises:
            AgendaNotLoadedError: If the collection is not in the LOADED state
        """
        if self._state != CollectionState.LOADED:
            raise AgendaNotLoadedError(f"Agenda for camp {self.camp_id} is {self._state.value}")
        return list(self._days)

    def day(self, day_number: int) -> AgendaDay | None:
        for agenda_day in self.days:
            if agenda_day.day == day_number:
                return agenda_day
        return None

    def find_session(self, session_id: int) -> AgendaItem | None:
        if not self.is_loaded:
            return None
        for agenda_day in self._days:
            for item in agenda_day.items:
                if item.id == session_id:
                    return item
        return None

    async def load(self, *, force: bool = False) -> list[AgendaDay]:
        """Load the agenda, from cache unless stale or forced.

        Raises:
            GatewayError: If the fetch fails (state moves to ERROR)
        """
        key = agenda_key(self.camp_id)
        cached = None if force else self._cache.get(key)
        if cached is not None:
            self._days = cached
            self._state = CollectionState.LOADED
            return list(self._days)

        self._state = CollectionState.LOADING
        try:
            days = await self._gateway.fetch_agenda(self.camp_id)
        except GatewayError as e:
            self._state = CollectionState.ERROR
            self.last_error = e.message
            logger.error(f"[STORE] Failed to load agenda for camp {self.camp_id}: {e.message}")
            raise

        self._cache.set(key, days)
        self._days = days
        self._state = CollectionState.LOADED
        self.last_error = None
        logger.debug(f"[STORE] Loaded {len(days)} days for camp {self.camp_id}")
        return list(days)

    async def refresh(self) -> list[AgendaDay]:
        return await self.load(force=True)

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    async def _cached(self, key: tuple, fetch: Callable[[], Awaitable[T]]) -> T:
        value = self._cache.get(key)
        if value is None:
            value = await fetch()
            self._cache.set(key, value)
        return value

    async def camp(self) -> Camp:
        return await self._cached(camp_key(self.camp_id), lambda: self._gateway.fetch_camp(self.camp_id))

    async def clinicians(self) -> list[Clinician]:
        return await self._cached(clinicians_key(self.camp_id), lambda: self._gateway.fetch_clinicians(self.camp_id))

    async def locations(self) -> list[Location]:
        return await self._cached(locations_key(self.camp_id), lambda: self._gateway.fetch_locations(self.camp_id))

    async def staff(self) -> list[StaffMember]:
        return await self._cached(staff_key(), self._gateway.fetch_staff)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def is_pending(self, kind: MutationKind) -> bool:
        return kind in self._pending

    def _notify(self, notice: Notice) -> None:
        self._notifier.notify(notice)

    def _invalid(self, field: str, notice: Notice) -> MutationOutcome:
        self._notify(notice)
        return MutationOutcome(OutcomeKind.INVALID, notice=notice, invalid_field=field)

    async def _invalidate_and_reload(self) -> None:
        self._cache.invalidate(agenda_key(self.camp_id))
        self._cache.invalidate(camp_key(self.camp_id), exact=True)
        try:
            await self.refresh()
        except GatewayError:
            # State is ERROR and last_error is set; the mutation itself succeeded
            logger.warning(f"[STORE] Re-fetch after mutation failed for camp {self.camp_id}")

    async def _dispatch(
        self,
        kind: MutationKind,
        call: Callable[[], Awaitable[Any]],
        success: Notice,
        failure_title: str,
    ) -> MutationOutcome:
        self._pending.add(kind)
        try:
            data = await call()
        except GatewayError as e:
            notice = Notice(failure_title, e.message, "destructive")
            logger.warning(f"[STORE] {kind.value} failed for camp {self.camp_id}: {e.message}")
            self._notify(notice)
            return MutationOutcome(OutcomeKind.FAILED, notice=notice)
        finally:
            self._pending.discard(kind)

        await self._invalidate_and_reload()
        self._notify(success)
        return MutationOutcome(OutcomeKind.SUCCESS, notice=success, data=data)

    async def add_session(self, item: AgendaItem) -> MutationOutcome:
        """Validate and create a session. Never retried; each call creates one."""
        result = validate_new_session(item)
        if not result.valid:
            return self._invalid(result.first.field, result.first.notice)
        logger.info(f"[STORE] Adding session '{item.title}' to camp {self.camp_id} day {item.day}")
        return await self._dispatch(
            MutationKind.ADD,
            lambda: self._gateway.add_session(self.camp_id, item),
            SESSION_ADDED,
            "Failed to add session",
        )

    async def update_session(self, item: AgendaItem | None) -> MutationOutcome:
        result = validate_session_update(item)
        if not result.valid:
            return self._invalid(result.first.field, result.first.notice)
        logger.info(f"[STORE] Updating session {item.id} in camp {self.camp_id}")
        return await self._dispatch(
            MutationKind.UPDATE,
            lambda: self._gateway.update_session(self.camp_id, item.id, item),
            SESSION_UPDATED,
            "Failed to update session",
        )

    def delete_confirmation_message(self, session_id: int) -> str:
        item = self.find_session(session_id)
        if item is None:
            return "Are you sure you want to delete this session?"
        return f'Are you sure you want to delete "{item.title}" ({item.start_time} - {item.end_time})?'

    async def delete_session(
        self,
        session_id: int,
        confirm: Callable[[str], bool],
    ) -> MutationOutcome:
        """Delete a session after confirmation.

        Args:
            session_id: Session to delete
            confirm: Called with the confirmation message; returning False
                cancels the delete without any request

        Returns:
            MutationOutcome; a session already gone on the service counts as deleted
        """
        if not confirm(self.delete_confirmation_message(session_id)):
            logger.debug(f"[STORE] Delete of session {session_id} cancelled")
            return MutationOutcome(OutcomeKind.CANCELLED)

        async def call() -> dict[str, Any]:
            try:
                return await self._gateway.delete_session(self.camp_id, session_id)
            except GatewayError as e:
                # Only a missing session is already applied; a missing camp is a failure
                if e.status_code != 404 or e.message != SESSION_NOT_FOUND:
                    raise
                logger.info(f"[STORE] Session {session_id} already deleted")
                return {"success": True, "message": e.message}

        return await self._dispatch(MutationKind.DELETE, call, SESSION_DELETED, "Failed to delete session")

    async def copy_session(self, session_id: int, days: list[int]) -> MutationOutcome:
        """Copy a session to the given days. An empty day list is never sent."""
        if not days:
            self._notify(EMPTY_SELECTION_NOTICE)
            return MutationOutcome(OutcomeKind.NOTHING_TO_DO, notice=EMPTY_SELECTION_NOTICE, invalid_field="days")
        target_days = sorted(set(days))
        logger.info(f"[STORE] Copying session {session_id} to days {target_days}")
        return await self._dispatch(
            MutationKind.COPY,
            lambda: self._gateway.copy_session(self.camp_id, session_id, target_days),
            SESSION_COPIED,
            "Failed to copy session",
        )

    async def export_agenda(self) -> MutationOutcome:
        """Export the agenda to agenda_camp_<id>.csv in the export directory."""
        if not self.is_loaded or not self._days:
            self._notify(NO_AGENDA_ITEMS)
            return MutationOutcome(OutcomeKind.NOTHING_TO_DO, notice=NO_AGENDA_ITEMS)
        if count_sessions(self._days) == 0:
            self._notify(NO_SESSIONS)
            return MutationOutcome(OutcomeKind.NOTHING_TO_DO, notice=NO_SESSIONS)

        self._pending.add(MutationKind.EXPORT)
        try:
            export_days = await self._gateway.fetch_export(self.camp_id)
            clinicians = await self.clinicians()
            locations = await self.locations()
            result = build_agenda_csv(export_days, clinicians, locations)
            if result.session_count == 0:
                self._notify(NO_SESSIONS)
                return MutationOutcome(OutcomeKind.NOTHING_TO_DO, notice=NO_SESSIONS)
            export_dir = self._export_dir if self._export_dir is not None else settings.export_dir
            result = write_export(result, self.camp_id, export_dir)
        except (GatewayError, OSError) as e:
            message = e.message if isinstance(e, GatewayError) else str(e)
            notice = Notice("Failed to export agenda", message, "destructive")
            logger.error(f"[EXPORT] Export failed for camp {self.camp_id}: {message}")
            self._notify(notice)
            return MutationOutcome(OutcomeKind.FAILED, notice=notice)
        finally:
            self._pending.discard(MutationKind.EXPORT)

        notice = Notice("Export successful", f"Exported {result.session_count} sessions to CSV file.")
        self._notify(notice)
        return MutationOutcome(OutcomeKind.SUCCESS, notice=notice, data=result)
