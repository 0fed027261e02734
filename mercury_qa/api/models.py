from typing import Optional

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    username: str
    password: Optional[str] = None


class UserInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    username: str
    email: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    token: str
    user: UserInfo


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str
