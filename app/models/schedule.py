from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)

    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to_teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    assigned_to_group_id = Column(Integer, ForeignKey("groups.id", ondelete="SET NULL"), nullable=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True, index=True)

    # display string; copied from Room.name when room_id is set
    location = Column(String(200), nullable=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True, index=True)

    is_recurring = Column(Boolean, nullable=False, default=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    # ["MON", "WED"]; only meaningful when is_recurring
    days_of_week = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    sessions = relationship(
        "ScheduleSession",
        back_populates="schedule",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ScheduleSession.start_time",
    )

    creator = relationship("User", foreign_keys=[creator_id])
    assigned_to_teacher = relationship("User", foreign_keys=[assigned_to_teacher_id])
    assigned_to_group = relationship("Group")
    course = relationship("Course")
    room = relationship("Room")


class ScheduleSession(Base):
    __tablename__ = "schedule_sessions"

    id = Column(Integer, primary_key=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True)

    # reference date + wall-clock time
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    schedule = relationship("Schedule", back_populates="sessions")
