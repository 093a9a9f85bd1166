from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.utils.auth import require_staff

from app.models.schedule import Schedule, ScheduleSession
from app.models.user import User
from app.models.group import Group
from app.models.course import Course
from app.models.room import Room

from app.schemas.schedule import ScheduleProposal, ScheduleOut, SessionOut, ConflictOut
from app.utils.conflict import check_conflicts
from app.utils.errors import ValidationError, NotFoundError, ConflictError, PersistenceError
from app.utils.excel_export import rows_to_xlsx_bytes, make_filename
from app.utils.timeslots import combine, format_hhmm

import logging
logger = logging.getLogger("app.schedules")


router = APIRouter(prefix="/schedules", tags=["Schedules"])


def schedule_to_out(s: Schedule) -> ScheduleOut:
    return ScheduleOut(
        id=s.id,
        title=s.title,
        creator_id=s.creator_id,
        assigned_to_teacher_id=s.assigned_to_teacher_id,
        assigned_to_group_id=s.assigned_to_group_id,
        course_id=s.course_id,
        room_id=s.room_id,
        location=s.location,
        is_recurring=bool(s.is_recurring),
        start_date=s.start_date,
        end_date=s.end_date,
        days_of_week=list(s.days_of_week or []),
        sessions=[
            SessionOut(
                id=x.id,
                start_time=x.start_time,
                end_time=x.end_time,
                start=format_hhmm(x.start_time),
                end=format_hhmm(x.end_time),
            )
            for x in sorted(s.sessions, key=lambda x: x.start_time)
        ],
        teacher_name=s.assigned_to_teacher.display_name if s.assigned_to_teacher else None,
        group_name=s.assigned_to_group.name if s.assigned_to_group else None,
        course_name=s.course.name if s.course else None,
    )


def _require_fields(body: ScheduleProposal):
    if not body.title:
        raise ValidationError("title is required", field="title")
    if body.creator_id is None:
        raise ValidationError("creatorId is required", field="creatorId")


def _check_references(db: Session, body: ScheduleProposal) -> Optional[Room]:
    """Every referenced id must resolve. Returns the room, if any."""
    checks = [
        ("creatorId", User, body.creator_id),
        ("assignedToTeacherId", User, body.assigned_to_teacher_id),
        ("assignedToGroupId", Group, body.assigned_to_group_id),
        ("courseId", Course, body.course_id),
    ]
    for field, model, value in checks:
        if value is not None and not db.query(model.id).filter(model.id == value).first():
            raise NotFoundError(f"{field} {value} not found", field=field)

    if body.room_id is None:
        return None
    room = db.get(Room, body.room_id)
    if not room:
        raise NotFoundError(f"roomId {body.room_id} not found", field="roomId")
    return room


def _session_rows(body: ScheduleProposal) -> List[ScheduleSession]:
    reference = body.start_date or date.today()
    return [
        ScheduleSession(
            start_time=combine(reference, s.start_time),
            end_time=combine(reference, s.end_time),
        )
        for s in body.sessions
    ]


def _apply(s: Schedule, body: ScheduleProposal, room: Optional[Room]):
    s.title = body.title
    s.creator_id = body.creator_id
    s.assigned_to_teacher_id = body.assigned_to_teacher_id
    s.assigned_to_group_id = body.assigned_to_group_id
    s.course_id = body.course_id
    s.room_id = body.room_id
    # room name wins over free text
    s.location = room.name if room else body.location
    s.is_recurring = body.is_recurring
    s.start_date = body.start_date
    s.end_date = body.end_date
    s.days_of_week = list(body.days_of_week)


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to %s", action)
        raise PersistenceError(f"Failed to {action}")


def _guard(db: Session, body: ScheduleProposal, exclude_id: Optional[int] = None) -> Optional[Room]:
    _require_fields(body)
    room = _check_references(db, body)

    conflict = check_conflicts(db, body, exclude_schedule_id=exclude_id, logger=logger)
    if conflict:
        raise ConflictError(conflict.message)
    return room


def _listing_query(
    db: Session,
    teacher_id: Optional[int],
    group_id: Optional[int],
    course_id: Optional[int],
    room_id: Optional[int],
):
    q = db.query(Schedule).options(selectinload(Schedule.sessions))
    if teacher_id is not None:
        q = q.filter(Schedule.assigned_to_teacher_id == teacher_id)
    if group_id is not None:
        q = q.filter(Schedule.assigned_to_group_id == group_id)
    if course_id is not None:
        q = q.filter(Schedule.course_id == course_id)
    if room_id is not None:
        q = q.filter(Schedule.room_id == room_id)
    return q.order_by(Schedule.start_date.asc(), Schedule.id.asc())


@router.get("", response_model=list[ScheduleOut])
def list_schedules(
    db: Session = Depends(get_db),
    teacher_id: Optional[int] = Query(None),
    group_id: Optional[int] = Query(None),
    course_id: Optional[int] = Query(None),
    room_id: Optional[int] = Query(None),
):
    rows = _listing_query(db, teacher_id, group_id, course_id, room_id).all()
    return [schedule_to_out(s) for s in rows]


EXPORT_HEADERS = [
    "Schedule ID", "Title", "Teacher", "Group", "Course", "Location",
    "Recurring", "Days", "Start Date", "End Date", "Start", "End",
]


@router.get("/export")
def export_schedules(
    db: Session = Depends(get_db),
    teacher_id: Optional[int] = Query(None),
    group_id: Optional[int] = Query(None),
    course_id: Optional[int] = Query(None),
    room_id: Optional[int] = Query(None),
):
    """
    One spreadsheet row per session; schedules without sessions get a
    single row with empty times.
    """
    rows = []
    for s in _listing_query(db, teacher_id, group_id, course_id, room_id).all():
        out = schedule_to_out(s)
        base = {
            "Schedule ID": out.id,
            "Title": out.title,
            "Teacher": out.teacher_name,
            "Group": out.group_name,
            "Course": out.course_name,
            "Location": out.location,
            "Recurring": "Y" if out.is_recurring else "N",
            "Days": out.days_of_week,
            "Start Date": out.start_date,
            "End Date": out.end_date,
        }
        if not out.sessions:
            rows.append(base)
        for x in out.sessions:
            rows.append({**base, "Start": x.start, "End": x.end})

    xlsx_bytes = rows_to_xlsx_bytes(rows, EXPORT_HEADERS, sheet_name="Schedules")
    filename = make_filename("schedules")
    return StreamingResponse(
        iter([xlsx_bytes]),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{schedule_id}", response_model=ScheduleOut)
def get_schedule(schedule_id: int, db: Session = Depends(get_db)):
    s = db.get(Schedule, schedule_id)
    if not s:
        raise NotFoundError("Schedule not found")
    return schedule_to_out(s)


# dry run, nothing is written
@router.post("/check", response_model=ConflictOut)
def check_schedule(
    body: ScheduleProposal,
    exclude_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    conflict = check_conflicts(db, body, exclude_schedule_id=exclude_id, logger=logger)
    if not conflict:
        return ConflictOut(conflict=False)
    return ConflictOut(
        conflict=True,
        reason=conflict.message,
        resource=conflict.resource,
        start=conflict.start,
        end=conflict.end,
        schedule_id=conflict.schedule_id,
        schedule_title=conflict.schedule_title,
    )


@router.post("", response_model=ScheduleOut, status_code=201)
def create_schedule(
    body: ScheduleProposal,
    db: Session = Depends(get_db),
    user=Depends(require_staff),
):
    room = _guard(db, body)

    s = Schedule()
    _apply(s, body, room)
    # schedule and its sessions go out in the same commit
    s.sessions = _session_rows(body)
    db.add(s)
    _commit(db, "create schedule")
    db.refresh(s)

    logger.info("schedule %s created by user %s with %d session(s)", s.id, getattr(user, "id", None), len(s.sessions))
    return schedule_to_out(s)


@router.put("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(
    schedule_id: int,
    body: ScheduleProposal,
    db: Session = Depends(get_db),
    user=Depends(require_staff),
):
    s = db.get(Schedule, schedule_id)
    if not s:
        raise NotFoundError("Schedule not found")

    room = _guard(db, body, exclude_id=schedule_id)

    _apply(s, body, room)

    # full replacement; old rows are deleted as orphans in the same commit
    s.sessions = _session_rows(body)

    _commit(db, "update schedule")
    db.refresh(s)

    logger.info("schedule %s updated by user %s", s.id, getattr(user, "id", None))
    return schedule_to_out(s)


@router.delete("/{schedule_id}")
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    user=Depends(require_staff),
):
    s = db.get(Schedule, schedule_id)
    if not s:
        raise NotFoundError("Schedule not found")

    db.delete(s)
    _commit(db, "delete schedule")

    logger.info("schedule %s deleted by user %s", schedule_id, getattr(user, "id", None))
    return {"message": "Schedule deleted successfully"}
