"""Camp agenda endpoints.

Days are derived from the camp date range; sessions are stored per day.
Writes are last-write-wins: there is no version token on sessions.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from camp_agenda.api.camps import get_camp_or_404
from camp_agenda.api.errors import APIError
from camp_agenda.api.schemas import (
    AgendaDayOut,
    AgendaResponse,
    CopyRequest,
    CopyResponse,
    SessionCreate,
    SessionOut,
    SessionUpdate,
    StaffMemberOut,
    SuccessResponse,
)
from camp_agenda.db.models import AgendaSession, Camp, StaffMember
from camp_agenda.db.session import get_db

router = APIRouter(prefix="/api/camps/{camp_id}/agenda", tags=["agenda"])

# Fields duplicated by copy-to-days; id, day and timestamps are not copied.
_COPY_FIELDS = (
    "title",
    "description",
    "start_time",
    "end_time",
    "location_id",
    "clinician_id",
    "session_type",
    "capacity",
    "materials",
    "notes",
    "status",
    "staff_ids",
)


def _staff_lookup(db: Session, sessions: list[AgendaSession]) -> dict[int, StaffMember]:
    staff_ids = {sid for s in sessions for sid in (s.staff_ids or [])}
    if not staff_ids:
        return {}
    members = db.execute(select(StaffMember).where(StaffMember.id.in_(staff_ids))).scalars().all()
    return {m.id: m for m in members}


def _session_to_out(session: AgendaSession, staff_by_id: dict[int, StaffMember]) -> SessionOut:
    """Convert AgendaSession to SessionOut.

    Staff ids that no longer resolve are dropped; staff are weak references.
    """
    staff = [
        StaffMemberOut.model_validate(staff_by_id[sid], from_attributes=True)
        for sid in (session.staff_ids or [])
        if sid in staff_by_id
    ]
    return SessionOut(
        id=session.id,
        title=session.title,
        description=session.description,
        start_time=session.start_time,
        end_time=session.end_time,
        day=session.day,
        location_id=session.location_id,
        clinician_id=session.clinician_id,
        session_type=session.session_type,
        capacity=session.capacity,
        materials=session.materials,
        notes=session.notes,
        status=session.status,
        staff_assignments=staff,
    )


def _build_days(db: Session, camp: Camp) -> list[AgendaDayOut]:
    sessions = list(
        db.execute(
            select(AgendaSession)
            .where(AgendaSession.camp_id == camp.id)
            .order_by(AgendaSession.day, AgendaSession.start_time, AgendaSession.id)
        ).scalars()
    )
    staff_by_id = _staff_lookup(db, sessions)

    days: list[AgendaDayOut] = []
    for day_number in range(1, camp.day_count + 1):
        items = [_session_to_out(s, staff_by_id) for s in sessions if s.day == day_number]
        days.append(
            AgendaDayOut(
                day=day_number,
                date=camp.start_date + timedelta(days=day_number - 1),
                title=f"Day {day_number}",
                items=items,
            )
        )
    return days


def _check_day_in_range(camp: Camp, day: int) -> None:
    if day < 1 or day > camp.day_count:
        raise APIError(400, f"Day {day} is outside the camp schedule (1-{camp.day_count})")


def _get_session_or_404(db: Session, camp_id: int, session_id: int) -> AgendaSession:
    agenda_session = db.execute(
        select(AgendaSession).where(AgendaSession.id == session_id, AgendaSession.camp_id == camp_id)
    ).scalar_one_or_none()
    if agenda_session is None:
        logger.warning(f"[AGENDA] Session not found: camp_id={camp_id}, session_id={session_id}")
        raise APIError(404, "Agenda item not found")
    return agenda_session


@router.get("", response_model=AgendaResponse)
def get_agenda(camp_id: int, db: Session = Depends(get_db)):
    camp = get_camp_or_404(db, camp_id)
    days = _build_days(db, camp)
    logger.info(f"[AGENDA] Agenda loaded: camp_id={camp_id}, days={len(days)}, sessions={sum(len(d.items) for d in days)}")
    return AgendaResponse(data=days)


@router.get("/export", response_model=AgendaResponse)
def export_agenda(camp_id: int, db: Session = Depends(get_db)):
    """Return the agenda for export; CSV is synthesized by the client."""
    camp = get_camp_or_404(db, camp_id)
    logger.info(f"[AGENDA] Export requested: camp_id={camp_id}")
    return AgendaResponse(data=_build_days(db, camp))


@router.post("", response_model=SessionOut, status_code=201)
def create_session(camp_id: int, payload: SessionCreate, db: Session = Depends(get_db)):
    camp = get_camp_or_404(db, camp_id)
    _check_day_in_range(camp, payload.day)

    fields = payload.model_dump(exclude={"staff_assignments"})
    agenda_session = AgendaSession(
        camp_id=camp_id,
        staff_ids=[ref.id for ref in payload.staff_assignments],
        **fields,
    )
    db.add(agenda_session)
    db.commit()
    db.refresh(agenda_session)

    logger.info(f"[AGENDA] Session created: camp_id={camp_id}, session_id={agenda_session.id}, day={agenda_session.day}")
    return _session_to_out(agenda_session, _staff_lookup(db, [agenda_session]))


@router.put("/{session_id}", response_model=SessionOut)
def update_session(camp_id: int, session_id: int, payload: SessionUpdate, db: Session = Depends(get_db)):
    camp = get_camp_or_404(db, camp_id)
    agenda_session = _get_session_or_404(db, camp_id, session_id)

    changes = payload.model_dump(exclude_unset=True, exclude={"staff_assignments"})
    if "day" in changes and changes["day"] is not None:
        _check_day_in_range(camp, changes["day"])

    # Required columns cannot be cleared by a partial update
    for required in ("title", "start_time", "end_time", "day", "session_type", "status"):
        if required in changes and changes[required] is None:
            del changes[required]

    start_time = changes.get("start_time", agenda_session.start_time)
    end_time = changes.get("end_time", agenda_session.end_time)
    if start_time >= end_time:
        raise APIError(
            422,
            "Validation failed",
            details=[{"field": "endTime", "message": "End time must be after start time"}],
        )

    for field, value in changes.items():
        setattr(agenda_session, field, value)
    if payload.staff_assignments is not None:
        agenda_session.staff_ids = [ref.id for ref in payload.staff_assignments]

    db.commit()
    db.refresh(agenda_session)

    logger.info(f"[AGENDA] Session updated: camp_id={camp_id}, session_id={session_id}, fields={sorted(changes)}")
    return _session_to_out(agenda_session, _staff_lookup(db, [agenda_session]))


@router.delete("/{session_id}", response_model=SuccessResponse)
def delete_session(camp_id: int, session_id: int, db: Session = Depends(get_db)):
    get_camp_or_404(db, camp_id)
    agenda_session = _get_session_or_404(db, camp_id, session_id)
    db.delete(agenda_session)
    db.commit()
    logger.info(f"[AGENDA] Session deleted: camp_id={camp_id}, session_id={session_id}")
    return SuccessResponse(message="Agenda item deleted successfully")


@router.post("/{session_id}/copy", response_model=CopyResponse)
def copy_session(camp_id: int, session_id: int, payload: CopyRequest, db: Session = Depends(get_db)):
    """Duplicate a session into each target day.

    No overlap detection against sessions already on the target days.
    """
    camp = get_camp_or_404(db, camp_id)
    source = _get_session_or_404(db, camp_id, session_id)

    if not payload.days:
        raise APIError(400, "Please select at least one day to copy to")
    for day in payload.days:
        _check_day_in_range(camp, day)

    copies: list[AgendaSession] = []
    for day in dict.fromkeys(payload.days):
        fields = {name: getattr(source, name) for name in _COPY_FIELDS}
        fields["staff_ids"] = list(source.staff_ids or [])
        duplicate = AgendaSession(camp_id=camp_id, day=day, **fields)
        db.add(duplicate)
        copies.append(duplicate)
    db.commit()
    for duplicate in copies:
        db.refresh(duplicate)

    logger.info(f"[AGENDA] Session copied: camp_id={camp_id}, session_id={session_id}, days={list(dict.fromkeys(payload.days))}")
    staff_by_id = _staff_lookup(db, copies)
    return CopyResponse(
        message=f"Session copied to {len(copies)} day(s)",
        data=[_session_to_out(c, staff_by_id) for c in copies],
    )
