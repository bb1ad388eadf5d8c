"""API contract schemas for the camp agenda service.

All request and response bodies are camelCase on the wire (startTime,
sessionType, staffAssignments, ...) to match the agenda client.
"""

from __future__ import annotations

import re
from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

SessionTypeValue = Literal[
    "opening",
    "instruction",
    "drill",
    "scrimmage",
    "evaluation",
    "break",
    "meal",
    "lecture",
    "activity",
    "other",
]
SessionStatusValue = Literal["draft", "scheduled", "completed", "cancelled"]

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class WireModel(BaseModel):
    """Base for camelCase wire models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_hhmm(value: str | None) -> str | None:
    if value is not None and not _HHMM.match(value):
        raise ValueError("must be a wall-clock time in HH:MM format")
    return value


# ============================================================================
# Reference data
# ============================================================================


class StaffMemberIn(WireModel):
    name: str = Field(min_length=1)
    role: str | None = None
    email: str | None = None
    phone: str | None = None


class StaffMemberOut(StaffMemberIn):
    id: int


class StaffRef(WireModel):
    """Reference to a staff member inside a session payload; only the id is used."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: int


class ClinicianIn(WireModel):
    name: str = Field(min_length=1)
    email: str | None = None
    role: str | None = None
    specialization: str | None = None
    avatar: str | None = None


class ClinicianOut(ClinicianIn):
    id: int


class LocationIn(WireModel):
    name: str = Field(min_length=1)
    capacity: int | None = Field(default=None, ge=0)
    type: str | None = None
    notes: str | None = None


class LocationOut(LocationIn):
    id: int


class CampIn(WireModel):
    camp_code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    start_date: date_type
    end_date: date_type
    location: str | None = None
    status: str = "planning"

    @model_validator(mode="after")
    def check_date_range(self) -> CampIn:
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class CampOut(CampIn):
    id: int
    session_count: int = Field(description="Number of sessions on the camp agenda")
    day_count: int = Field(description="Number of agenda days in the camp date range")


# ============================================================================
# Agenda
# ============================================================================


class SessionCreate(WireModel):
    """Body of POST /api/camps/{campId}/agenda."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str
    description: str | None = None
    start_time: str
    end_time: str
    day: int = Field(ge=1)
    location_id: int | None = None
    clinician_id: int | None = None
    session_type: SessionTypeValue = "instruction"
    capacity: int | None = Field(default=None, ge=0)
    materials: str | None = None
    notes: str | None = None
    status: SessionStatusValue = "draft"
    staff_assignments: list[StaffRef] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def valid_time(cls, value: str) -> str:
        return _check_hhmm(value)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, value: str, info: ValidationInfo) -> str:
        start_time = info.data.get("start_time")
        if start_time and value <= start_time:
            raise ValueError("End time must be after start time")
        return value


class SessionUpdate(WireModel):
    """Body of PUT /api/camps/{campId}/agenda/{id}; only provided fields are applied."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    day: int | None = Field(default=None, ge=1)
    location_id: int | None = None
    clinician_id: int | None = None
    session_type: SessionTypeValue | None = None
    capacity: int | None = Field(default=None, ge=0)
    materials: str | None = None
    notes: str | None = None
    status: SessionStatusValue | None = None
    staff_assignments: list[StaffRef] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def valid_time(cls, value: str | None) -> str | None:
        return _check_hhmm(value)


class SessionOut(WireModel):
    id: int
    title: str
    description: str | None = None
    start_time: str
    end_time: str
    day: int
    location_id: int | None = None
    clinician_id: int | None = None
    session_type: str
    capacity: int | None = None
    materials: str | None = None
    notes: str | None = None
    status: str
    staff_assignments: list[StaffMemberOut] = Field(default_factory=list)


class AgendaDayOut(WireModel):
    day: int
    date: date_type
    title: str
    items: list[SessionOut]


class CopyRequest(WireModel):
    days: list[int]


# ============================================================================
# Envelopes
# ============================================================================


class AgendaResponse(BaseModel):
    data: list[AgendaDayOut]


class CampResponse(BaseModel):
    data: CampOut


class ClinicianListResponse(BaseModel):
    data: list[ClinicianOut]


class LocationListResponse(BaseModel):
    data: list[LocationOut]


class StaffListResponse(BaseModel):
    data: list[StaffMemberOut]


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


class CopyResponse(SuccessResponse):
    data: list[SessionOut]
