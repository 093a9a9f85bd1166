from fastapi import APIRouter, Depends
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.utils.auth import get_current_user

from app.models.schedule import Schedule
from app.models.group import group_members

from app.schemas.schedule import ScheduleOut
from app.routers.schedules import schedule_to_out

router = APIRouter(prefix="/me", tags=["Me - Schedules"])


# teaching schedules plus the classes of every group the caller belongs to
@router.get("/schedules", response_model=list[ScheduleOut])
def get_my_schedules(
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    my_groups = select(group_members.c.group_id).where(group_members.c.user_id == user.id)

    rows = (
        db.query(Schedule)
        .options(selectinload(Schedule.sessions))
        .filter(
            or_(
                Schedule.assigned_to_teacher_id == user.id,
                Schedule.assigned_to_group_id.in_(my_groups),
            )
        )
        .order_by(Schedule.start_date.asc(), Schedule.id.asc())
        .all()
    )
    return [schedule_to_out(s) for s in rows]
