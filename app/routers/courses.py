from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.course import Course
from app.schemas.course import CourseCreate, CourseUpdate, CourseOut
from app.utils.auth import require_admin
from app.utils.errors import ConflictError, NotFoundError

import logging
logger = logging.getLogger("app.courses")

router = APIRouter(prefix="/courses", tags=["Courses"])


def _get_course(db: Session, course_id: int) -> Course:
    c = db.get(Course, course_id)
    if not c:
        raise NotFoundError("Course not found")
    return c


@router.get("", response_model=list[CourseOut])
def list_courses(
    db: Session = Depends(get_db),
    keyword: Optional[str] = Query(None, description="code or name"),
):
    q = db.query(Course)
    if keyword:
        like = f"%{keyword}%"
        q = q.filter(or_(Course.code.ilike(like), Course.name.ilike(like)))
    return q.order_by(Course.code.asc()).all()


@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return _get_course(db, course_id)


@router.post("", response_model=CourseOut, status_code=201)
def create_course(
    body: CourseCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    code = body.code.strip()
    if db.query(Course.id).filter(Course.code == code).first():
        raise ConflictError("Course code already exists")

    c = Course(code=code, name=body.name.strip(), description=body.description)
    db.add(c)
    db.commit()
    db.refresh(c)
    logger.info("course %s (%s) created", c.id, c.code)
    return c


@router.put("/{course_id}", response_model=CourseOut)
def update_course(
    course_id: int,
    body: CourseUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    c = _get_course(db, course_id)

    data = body.model_dump(exclude_unset=True)
    if data.get("code") is not None:
        data["code"] = data["code"].strip()
        taken = db.query(Course.id).filter(Course.code == data["code"], Course.id != course_id).first()
        if taken:
            raise ConflictError("Course code already exists")

    for k, v in data.items():
        if v is not None:
            setattr(c, k, v)

    db.commit()
    db.refresh(c)
    return c


# schedules of the course keep existing with courseId cleared
@router.delete("/{course_id}")
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    c = _get_course(db, course_id)
    db.delete(c)
    db.commit()
    logger.info("course %s deleted", course_id)
    return {"message": "Course deleted successfully"}
