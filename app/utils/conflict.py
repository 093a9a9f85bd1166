# app/utils/conflict.py
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.models.schedule import Schedule
from app.utils.timeslots import format_hhmm

default_logger = logging.getLogger("app.schedules.conflict")


def times_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """
    Half-open interval intersection on "HH:mm" strings.
    Back-to-back sessions (end_a == start_b) do not overlap.
    """
    return start_a < end_b and end_a > start_b


@dataclass(frozen=True)
class Recurring:
    days: frozenset


@dataclass(frozen=True)
class OneOff:
    on: Optional[date] = None


Recurrence = Union[Recurring, OneOff]


def recurrence_of(is_recurring: bool, days_of_week: Sequence[str] | None, on: Optional[date] = None) -> Recurrence:
    if is_recurring:
        return Recurring(frozenset(days_of_week or ()))
    return OneOff(on)


def days_overlap(proposed: Recurrence, existing: Recurrence) -> bool:
    # a one-off on either side is treated as a possible clash
    if isinstance(proposed, Recurring) and isinstance(existing, Recurring):
        return bool(proposed.days & existing.days)
    return True


@dataclass
class Conflict:
    reason: str
    resource: str          # teacher / group / room / location
    start: str             # "HH:mm"
    end: str
    schedule_id: int
    schedule_title: str

    @property
    def message(self) -> str:
        return f"{self.reason} at {self.start}-{self.end} ({self.schedule_title})"


def find_candidate_schedules(
    db: Session,
    teacher_id: Optional[int] = None,
    group_id: Optional[int] = None,
    room_id: Optional[int] = None,
    location: Optional[str] = None,
    exclude_schedule_id: Optional[int] = None,
) -> List[Schedule]:
    """
    Every schedule sharing at least one of the given resources.
    Unset fields are not used as a criterion; with nothing set there is
    nothing to share and the result is empty.
    """
    filters = []
    if teacher_id is not None:
        filters.append(Schedule.assigned_to_teacher_id == teacher_id)
    if group_id is not None:
        filters.append(Schedule.assigned_to_group_id == group_id)
    if room_id is not None:
        filters.append(Schedule.room_id == room_id)
    if location and location.strip():
        filters.append(Schedule.location == location)

    if not filters:
        return []

    q = db.query(Schedule).options(selectinload(Schedule.sessions)).filter(or_(*filters))
    if exclude_schedule_id is not None:
        q = q.filter(Schedule.id != exclude_schedule_id)
    return q.order_by(Schedule.id.asc()).all()


def _conflict_reason(proposal, existing: Schedule):
    teacher_id = proposal.assigned_to_teacher_id
    group_id = proposal.assigned_to_group_id
    room_id = proposal.room_id
    location = proposal.location

    if teacher_id is not None and existing.assigned_to_teacher_id == teacher_id:
        return "teacher", "Teacher is already busy"
    if group_id is not None and existing.assigned_to_group_id == group_id:
        return "group", "Group already has a class"
    if room_id is not None and existing.room_id == room_id:
        return "room", "Room is already booked"
    if location and existing.location == location:
        return "location", f"Location {location} is already booked"
    # unreachable for query results: every candidate shares one field above
    return "schedule", "Schedule overlaps"


def find_conflict(proposal, candidates: Sequence[Schedule], logger: logging.Logger | None = None) -> Optional[Conflict]:
    """
    proposal: ScheduleProposal (sessions as "HH:mm" strings)
    candidates: schedules returned by find_candidate_schedules, sessions loaded

    Returns the first collision found, or None. A proposal without sessions
    never conflicts.
    """
    log = logger or default_logger
    proposed_recurrence = recurrence_of(proposal.is_recurring, proposal.days_of_week, proposal.start_date)

    for proposed in proposal.sessions:
        for existing in candidates:
            existing_recurrence = recurrence_of(existing.is_recurring, existing.days_of_week, existing.start_date)
            if not days_overlap(proposed_recurrence, existing_recurrence):
                continue

            for s in existing.sessions:
                e_start = format_hhmm(s.start_time)
                e_end = format_hhmm(s.end_time)
                if times_overlap(proposed.start_time, proposed.end_time, e_start, e_end):
                    resource, reason = _conflict_reason(proposal, existing)
                    conflict = Conflict(
                        reason=reason,
                        resource=resource,
                        start=e_start,
                        end=e_end,
                        schedule_id=existing.id,
                        schedule_title=existing.title,
                    )
                    log.info(
                        "conflict on %s: proposed %s-%s vs schedule %s %s-%s",
                        resource, proposed.start_time, proposed.end_time, existing.id, e_start, e_end,
                    )
                    return conflict
    return None


def check_conflicts(
    db: Session,
    proposal,
    exclude_schedule_id: Optional[int] = None,
    logger: logging.Logger | None = None,
) -> Optional[Conflict]:
    log = logger or default_logger
    candidates = find_candidate_schedules(
        db,
        teacher_id=proposal.assigned_to_teacher_id,
        group_id=proposal.assigned_to_group_id,
        room_id=proposal.room_id,
        location=proposal.location,
        exclude_schedule_id=exclude_schedule_id,
    )
    log.debug("conflict check: %d candidate schedule(s), exclude=%s", len(candidates), exclude_schedule_id)
    return find_conflict(proposal, candidates, logger=log)
