from typing import List, Literal, Optional
import datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel

Role = Literal["user", "admin"]


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        return None
    return value


class UserBase(CamelModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class UserRegister(UserBase):
    password: str = Field(..., min_length=1)


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)
    role: Role = "user"
    company_id: Optional[int] = None


class UserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class User(UserBase):
    id: int
    role: str
    company_id: Optional[int] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class UserList(CamelModel):
    users: List[User]
