"""Client-side agenda types.

Parsed from the camelCase JSON served by the agenda service and serialized
back the same way when a mutation is dispatched.
"""

from __future__ import annotations

from datetime import date as date_type
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionType(str, Enum):
    OPENING = "opening"
    INSTRUCTION = "instruction"
    DRILL = "drill"
    SCRIMMAGE = "scrimmage"
    EVALUATION = "evaluation"
    BREAK = "break"
    MEAL = "meal"
    LECTURE = "lecture"
    ACTIVITY = "activity"
    OTHER = "other"


class SessionStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


SESSION_TYPE_DISPLAY_NAMES: dict[str, str] = {
    SessionType.OPENING.value: "Opening Session",
    SessionType.INSTRUCTION.value: "Instruction",
    SessionType.DRILL.value: "Drill",
    SessionType.SCRIMMAGE.value: "Scrimmage",
    SessionType.EVALUATION.value: "Evaluation",
    SessionType.BREAK.value: "Break",
    SessionType.MEAL.value: "Meal",
    SessionType.LECTURE.value: "Lecture",
    SessionType.ACTIVITY.value: "Activity",
    SessionType.OTHER.value: "Other",
}


def session_type_display_name(session_type: SessionType | str | None) -> str:
    value = session_type.value if isinstance(session_type, SessionType) else session_type
    return SESSION_TYPE_DISPLAY_NAMES.get(value or "", "Unknown")


def status_label(status: SessionStatus | str | None) -> str:
    value = status.value if isinstance(status, SessionStatus) else status
    if value in {s.value for s in SessionStatus}:
        return value.capitalize()
    return "Unknown"


class WireModel(BaseModel):
    """Base for models exchanged with the agenda service."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )


class StaffMember(WireModel):
    id: int
    name: str
    role: str | None = None
    email: str | None = None
    phone: str | None = None


class Clinician(WireModel):
    id: int
    name: str
    email: str | None = None
    role: str | None = None
    specialization: str | None = None
    avatar: str | None = None


class Location(WireModel):
    id: int
    name: str
    capacity: int | None = None
    type: str | None = None
    notes: str | None = None


class Camp(WireModel):
    id: int
    camp_code: str
    name: str
    description: str | None = None
    start_date: date_type
    end_date: date_type
    location: str | None = None
    status: str
    session_count: int = 0
    day_count: int = 0


class AgendaItem(WireModel):
    """One session on a camp day.

    Times are fixed-width "HH:MM" strings, so string comparison orders them.
    """

    id: int | None = None
    title: str = ""
    description: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    day: int = Field(default=1, ge=1)
    location_id: int | None = None
    clinician_id: int | None = None
    session_type: SessionType | None = SessionType.INSTRUCTION
    capacity: int | None = None
    materials: str | None = None
    notes: str | None = None
    status: SessionStatus = SessionStatus.DRAFT
    staff_assignments: list[StaffMember] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Serialize for a POST/PUT body."""
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


class AgendaDay(WireModel):
    day: int = Field(ge=1)
    date: date_type
    title: str
    items: list[AgendaItem] = Field(default_factory=list)

    @property
    def session_count(self) -> int:
        return len(self.items)


def parse_agenda_days(payload: list | None) -> list[AgendaDay]:
    """Parse the agenda envelope's data list.

    Null days and null items (partially loaded data) are dropped here, at the
    boundary, so a loaded collection never contains them.
    """
    days: list[AgendaDay] = []
    for raw_day in payload or []:
        if not raw_day:
            continue
        raw_items = [raw for raw in (raw_day.get("items") or []) if raw]
        days.append(AgendaDay.model_validate({**raw_day, "items": raw_items}))
    return days
