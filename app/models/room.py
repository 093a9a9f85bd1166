from sqlalchemy import Column, Integer, String, JSON
from app.database import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    capacity = Column(Integer, nullable=False, default=0)

    # CLASSROOM / LAB / HALL / ONLINE ...
    type = Column(String(32), nullable=False, default="CLASSROOM")
    resources = Column(JSON, nullable=False, default=list)
    status = Column(String(32), nullable=False, default="AVAILABLE")
