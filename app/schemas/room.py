from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoomBase(BaseModel):
    name: str
    capacity: int = Field(0, ge=0)
    type: str = "CLASSROOM"
    resources: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    type: Optional[str] = None
    resources: Optional[List[str]] = None
    status: Optional[str] = None


class RoomOut(RoomBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str
