"""Camp metadata and reference data endpoints.

Clinicians and locations are read-only from the agenda's point of view;
the POST endpoints exist to seed a camp before building its agenda.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from camp_agenda.api.errors import APIError
from camp_agenda.api.schemas import (
    CampIn,
    CampOut,
    CampResponse,
    ClinicianIn,
    ClinicianListResponse,
    ClinicianOut,
    LocationIn,
    LocationListResponse,
    LocationOut,
    StaffListResponse,
    StaffMemberIn,
    StaffMemberOut,
)
from camp_agenda.db.models import AgendaSession, Camp, Clinician, Location, StaffMember
from camp_agenda.db.session import get_db

router = APIRouter(prefix="/api", tags=["camps"])


def get_camp_or_404(db: Session, camp_id: int) -> Camp:
    camp = db.get(Camp, camp_id)
    if camp is None:
        logger.warning(f"[CAMPS] Camp not found: camp_id={camp_id}")
        raise APIError(404, "Camp not found")
    return camp


def camp_to_out(db: Session, camp: Camp) -> CampOut:
    """Convert Camp to CampOut, deriving the agenda summary fields.

    Only sessions inside the camp date range count, matching what the agenda lists.
    """
    session_count = db.execute(
        select(func.count(AgendaSession.id)).where(
            AgendaSession.camp_id == camp.id,
            AgendaSession.day >= 1,
            AgendaSession.day <= camp.day_count,
        )
    ).scalar_one()
    return CampOut(
        id=camp.id,
        camp_code=camp.camp_code,
        name=camp.name,
        description=camp.description,
        start_date=camp.start_date,
        end_date=camp.end_date,
        location=camp.location,
        status=camp.status,
        session_count=session_count,
        day_count=camp.day_count,
    )


@router.post("/camps", response_model=CampResponse, status_code=201)
def create_camp(payload: CampIn, db: Session = Depends(get_db)):
    logger.info(f"[CAMPS] Creating camp code={payload.camp_code}")
    camp = Camp(**payload.model_dump())
    db.add(camp)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise APIError(409, f"Camp code '{payload.camp_code}' already exists") from e
    db.refresh(camp)
    return CampResponse(data=camp_to_out(db, camp))


@router.get("/camps/{camp_id}", response_model=CampResponse)
def get_camp(camp_id: int, db: Session = Depends(get_db)):
    camp = get_camp_or_404(db, camp_id)
    return CampResponse(data=camp_to_out(db, camp))


@router.get("/camps/{camp_id}/clinicians", response_model=ClinicianListResponse)
def list_clinicians(camp_id: int, db: Session = Depends(get_db)):
    get_camp_or_404(db, camp_id)
    clinicians = db.execute(select(Clinician).where(Clinician.camp_id == camp_id).order_by(Clinician.name)).scalars().all()
    return ClinicianListResponse(data=[ClinicianOut.model_validate(c, from_attributes=True) for c in clinicians])


@router.post("/camps/{camp_id}/clinicians", response_model=ClinicianOut, status_code=201)
def create_clinician(camp_id: int, payload: ClinicianIn, db: Session = Depends(get_db)):
    get_camp_or_404(db, camp_id)
    clinician = Clinician(camp_id=camp_id, **payload.model_dump())
    db.add(clinician)
    db.commit()
    db.refresh(clinician)
    logger.info(f"[CAMPS] Clinician created: camp_id={camp_id}, clinician_id={clinician.id}")
    return ClinicianOut.model_validate(clinician, from_attributes=True)


@router.get("/camps/{camp_id}/locations", response_model=LocationListResponse)
def list_locations(camp_id: int, db: Session = Depends(get_db)):
    get_camp_or_404(db, camp_id)
    locations = db.execute(select(Location).where(Location.camp_id == camp_id).order_by(Location.name)).scalars().all()
    return LocationListResponse(data=[LocationOut.model_validate(loc, from_attributes=True) for loc in locations])


@router.post("/camps/{camp_id}/locations", response_model=LocationOut, status_code=201)
def create_location(camp_id: int, payload: LocationIn, db: Session = Depends(get_db)):
    get_camp_or_404(db, camp_id)
    location = Location(camp_id=camp_id, **payload.model_dump())
    db.add(location)
    db.commit()
    db.refresh(location)
    logger.info(f"[CAMPS] Location created: camp_id={camp_id}, location_id={location.id}")
    return LocationOut.model_validate(location, from_attributes=True)


@router.get("/staff", response_model=StaffListResponse)
def list_staff(db: Session = Depends(get_db)):
    staff = db.execute(select(StaffMember).order_by(StaffMember.name)).scalars().all()
    return StaffListResponse(data=[StaffMemberOut.model_validate(s, from_attributes=True) for s in staff])


@router.post("/staff", response_model=StaffMemberOut, status_code=201)
def create_staff_member(payload: StaffMemberIn, db: Session = Depends(get_db)):
    member = StaffMember(**payload.model_dump())
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info(f"[CAMPS] Staff member created: staff_id={member.id}")
    return StaffMemberOut.model_validate(member, from_attributes=True)
