from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.group import Group
from app.models.user import User
from app.schemas.group import GroupCreate, GroupUpdate, GroupOut
from app.utils.auth import require_admin
from app.utils.errors import ConflictError, NotFoundError

import logging
logger = logging.getLogger("app.groups")

router = APIRouter(prefix="/groups", tags=["Groups"])


def _get_group(db: Session, group_id: int) -> Group:
    g = db.query(Group).options(selectinload(Group.members)).filter(Group.id == group_id).first()
    if not g:
        raise NotFoundError("Group not found")
    return g


def _resolve_members(db: Session, member_ids: List[int]) -> List[User]:
    ids = list(dict.fromkeys(member_ids))
    if not ids:
        return []
    users = db.query(User).filter(User.id.in_(ids)).all()
    missing = sorted(set(ids) - {u.id for u in users})
    if missing:
        raise NotFoundError("User not found", user_ids=missing)
    return users


@router.get("", response_model=list[GroupOut])
def list_groups(db: Session = Depends(get_db)):
    return db.query(Group).options(selectinload(Group.members)).order_by(Group.name.asc()).all()


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: int, db: Session = Depends(get_db)):
    return _get_group(db, group_id)


@router.post("", response_model=GroupOut, status_code=201)
def create_group(
    body: GroupCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    name = body.name.strip()
    if db.query(Group.id).filter(Group.name == name).first():
        raise ConflictError("Group name already exists")

    g = Group(name=name, members=_resolve_members(db, body.member_ids))
    db.add(g)
    db.commit()
    db.refresh(g)
    logger.info("group %s (%s) created with %d member(s)", g.id, g.name, len(g.members))
    return g


@router.put("/{group_id}", response_model=GroupOut)
def update_group(
    group_id: int,
    body: GroupUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    g = _get_group(db, group_id)

    if body.name is not None:
        name = body.name.strip()
        taken = db.query(Group.id).filter(Group.name == name, Group.id != group_id).first()
        if taken:
            raise ConflictError("Group name already exists")
        g.name = name

    if body.member_ids is not None:
        g.members = _resolve_members(db, body.member_ids)

    db.commit()
    db.refresh(g)
    return g


# schedules of the group keep existing with assignedToGroupId cleared
@router.delete("/{group_id}")
def delete_group(
    group_id: int,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    g = _get_group(db, group_id)
    db.delete(g)
    db.commit()
    logger.info("group %s deleted", group_id)
    return {"message": "Group deleted successfully"}
