from typing import Optional

from app.schemas.base import CamelModel
from app.schemas.user import User


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(User):
    token: str
