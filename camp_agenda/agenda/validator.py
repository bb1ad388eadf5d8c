"""Pre-submission checks for agenda sessions.

Rules run in a fixed order and stop at the first failure. A failure is a
returned result, never an exception; callers abort the mutation on it.
"""

from __future__ import annotations

from dataclasses import dataclass

from camp_agenda.agenda.notices import Notice
from camp_agenda.agenda.types import AgendaItem

MISSING_INFORMATION = "Missing information"
INVALID_TIME_RANGE = "Invalid time range"
UPDATE_ERROR = "Error updating session"


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    notice: Notice


@dataclass(frozen=True)
class ValidationResult:
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def first(self) -> ValidationIssue | None:
        return self.issues[0] if self.issues else None


VALID = ValidationResult()


def _fail(field: str, title: str, description: str) -> ValidationResult:
    return ValidationResult(issues=(ValidationIssue(field=field, notice=Notice(title, description, "destructive")),))


def _time_range_issue(item: AgendaItem) -> ValidationResult | None:
    # Fixed-width HH:MM strings compare in time order
    if item.start_time >= item.end_time:
        return _fail("endTime", INVALID_TIME_RANGE, "End time must be after start time.")
    return None


def validate_new_session(item: AgendaItem) -> ValidationResult:
    """Validate a session about to be added."""
    if not item.title or not item.title.strip():
        return _fail("title", MISSING_INFORMATION, "Please provide a title for the session.")
    if not item.start_time:
        return _fail("startTime", MISSING_INFORMATION, "Please provide a start time for the session.")
    if not item.end_time:
        return _fail("endTime", MISSING_INFORMATION, "Please provide an end time for the session.")
    issue = _time_range_issue(item)
    if issue is not None:
        return issue
    if not item.session_type:
        return _fail("sessionType", MISSING_INFORMATION, "Please select a session type.")
    return VALID


def validate_session_update(item: AgendaItem | None) -> ValidationResult:
    """Validate an edited session before it is sent as an update."""
    if item is None:
        return _fail("session", UPDATE_ERROR, "No session data to update.")
    if not item.id:
        return _fail("id", UPDATE_ERROR, "Session ID is missing.")
    if not item.title or not item.title.strip():
        return _fail("title", UPDATE_ERROR, "Session title cannot be empty.")
    if not item.start_time:
        return _fail("startTime", UPDATE_ERROR, "Start time is required.")
    if not item.end_time:
        return _fail("endTime", UPDATE_ERROR, "End time is required.")
    issue = _time_range_issue(item)
    if issue is not None:
        return issue
    if not item.session_type:
        return _fail("sessionType", UPDATE_ERROR, "Please select a session type.")
    return VALID
