from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserOut

Role = Literal["admin", "teacher", "student"]


class AdminUserCreateIn(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=72)
    role: Role = "student"
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AdminUserUpdateIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: Optional[Role] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AdminResetPasswordIn(BaseModel):
    new_password: str = Field(..., min_length=6, max_length=72)


class AdminUserListOut(BaseModel):
    items: list[UserOut]
    total: int
    page: int
    page_size: int
