from typing import List
from uuid import UUID
from pydantic import BaseModel


class SubjectCreate(BaseModel):
    name: str


class SubjectResponse(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class ClassCreate(BaseModel):
    name: str
    subjects: List[str] = []


class ClassUpdate(BaseModel):
    name: str


class ClassResponse(BaseModel):
    id: UUID
    name: str
    subjects: List[SubjectResponse] = []

    class Config:
        from_attributes = True
