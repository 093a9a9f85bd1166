from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.user import UserOut
from app.schemas.admin_user import (
    AdminUserCreateIn,
    AdminUserUpdateIn,
    AdminResetPasswordIn,
    AdminUserListOut,
)
from app.utils.auth import require_admin
from app.utils.errors import ConflictError, NotFoundError
from app.utils.hashing import hash_password

import logging
logger = logging.getLogger("app.admin")


router = APIRouter(prefix="/admin", tags=["Admin"])


def _get_user(db: Session, user_id: int) -> User:
    u = db.get(User, user_id)
    if not u:
        raise NotFoundError("User not found")
    return u


@router.get("/users", response_model=AdminUserListOut)
def admin_list_users(
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
    role: Optional[str] = Query(None, description="admin / teacher / student"),
    keyword: Optional[str] = Query(None, description="username or name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    if keyword:
        like = f"%{keyword}%"
        q = q.filter(or_(User.username.ilike(like), User.first_name.ilike(like), User.last_name.ilike(like)))

    total = q.count()
    users = (
        q.order_by(User.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return AdminUserListOut(
        items=[UserOut.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


# the only way to create teacher / admin accounts
@router.post("/users", response_model=UserOut, status_code=201)
def admin_create_user(
    body: AdminUserCreateIn,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    username = body.username.strip()
    if db.query(User.id).filter(User.username == username).first():
        raise ConflictError("Username already exists")

    u = User(
        username=username,
        password_hash=hash_password(body.password),
        role=body.role,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    logger.info("user %s (%s) created by admin %s", u.id, u.role, getattr(admin, "id", None))
    return u


@router.get("/users/{user_id}", response_model=UserOut)
def admin_get_user(user_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return _get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserOut)
def admin_update_user(
    user_id: int,
    body: AdminUserUpdateIn,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    u = _get_user(db, user_id)

    data = body.model_dump(exclude_unset=True)
    for k, v in data.items():
        if v is not None:
            setattr(u, k, v)

    db.commit()
    db.refresh(u)
    if "role" in data:
        logger.info("user %s role set to %s by admin %s", u.id, u.role, getattr(admin, "id", None))
    return u


@router.patch("/users/{user_id}/password")
def admin_reset_password(
    user_id: int,
    body: AdminResetPasswordIn,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    u = _get_user(db, user_id)
    u.password_hash = hash_password(body.new_password)
    db.commit()
    return {"message": "Password updated"}
