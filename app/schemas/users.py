from pydantic import BaseModel
from typing import Optional
from datetime import date
from uuid import UUID


class StudentBase(BaseModel):
    name: str
    dob: date
    class_id: Optional[UUID] = None
    profile_picture_url: Optional[str] = None


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    name: Optional[str] = None
    dob: Optional[date] = None
    class_id: Optional[UUID] = None
    profile_picture_url: Optional[str] = None


class StudentResponse(StudentBase):
    id: int

    class Config:
        from_attributes = True
