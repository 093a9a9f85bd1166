from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.room import Room
from app.schemas.room import RoomCreate, RoomUpdate, RoomOut
from app.utils.auth import require_admin
from app.utils.errors import ConflictError, NotFoundError, ValidationError

import logging
logger = logging.getLogger("app.rooms")

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def _get_room(db: Session, room_id: int) -> Room:
    room = db.get(Room, room_id)
    if not room:
        raise NotFoundError("Room not found")
    return room


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    q = db.query(Room.id).filter(Room.name == name)
    if exclude_id is not None:
        q = q.filter(Room.id != exclude_id)
    return q.first() is not None


@router.get("", response_model=list[RoomOut])
def list_rooms(db: Session = Depends(get_db)):
    return db.query(Room).order_by(Room.name.asc()).all()


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: int, db: Session = Depends(get_db)):
    return _get_room(db, room_id)


@router.post("", response_model=RoomOut, status_code=201)
def create_room(
    body: RoomCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    if _name_taken(db, body.name):
        raise ConflictError("Room name already exists")

    room = Room(
        name=body.name,
        capacity=body.capacity,
        type=body.type or "CLASSROOM",
        resources=list(body.resources),
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info("room %s (%s) created", room.id, room.name)
    return room


@router.put("/{room_id}", response_model=RoomOut)
def update_room(
    room_id: int,
    body: RoomUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    room = _get_room(db, room_id)

    data = body.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        data["name"] = data["name"].strip()
        if not data["name"]:
            raise ValidationError("name must not be empty", field="name")
        if _name_taken(db, data["name"], exclude_id=room_id):
            raise ConflictError("Room name already exists")

    for k, v in data.items():
        if v is not None:
            setattr(room, k, v)

    db.commit()
    db.refresh(room)
    return room


# schedules keep their location text; room_id is nulled by the FK
@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    room = _get_room(db, room_id)
    db.delete(room)
    db.commit()
    logger.info("room %s deleted", room_id)
    return {"message": "Room deleted successfully"}
