from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    # admin / teacher / student
    role = Column(String(20), nullable=False, default="student")
    first_name = Column(String(100))
    last_name = Column(String(100))
    created_at = Column(TIMESTAMP, default=datetime.utcnow)

    groups = relationship("Group", secondary="group_members", back_populates="members")

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or self.username
