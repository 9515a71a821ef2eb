from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class Login(BaseModel):
    username: str = "admin"
    password: str


class AdminResponse(BaseModel):
    id: UUID
    username: str
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
