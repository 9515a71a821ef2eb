import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
import uuid

from app.core.database import get_db
from app.core.errors import NotFound, InvalidInput
from app.core.security import sanitize_input
from app.models.lms import Class, Subject
from app.models.users import Student
from app.schemas.lms import ClassCreate, ClassUpdate, ClassResponse, SubjectCreate

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_class_or_404(db: Session, class_id: uuid.UUID) -> Class:
    cls = db.get(Class, class_id)
    if not cls:
        raise NotFound("Class not found")
    return cls


def _add_subject(db: Session, cls: Class, name: str) -> Subject:
    name = sanitize_input(name)
    if not name:
        raise InvalidInput("Subject name cannot be empty")
    if any(s.name.lower() == name.lower() for s in cls.subjects):
        raise InvalidInput(f"Subject '{name}' already exists in {cls.name}")

    last_position = (
        db.query(func.max(Subject.position)).filter(Subject.class_id == cls.id).scalar()
    )
    subject = Subject(
        name=name,
        position=0 if last_position is None else last_position + 1,
    )
    cls.subjects.append(subject)
    return subject


@router.get("", response_model=List[ClassResponse])
def get_classes(db: Session = Depends(get_db)):
    return db.query(Class).order_by(Class.name).all()


@router.post("", response_model=ClassResponse, status_code=201)
def create_class(class_in: ClassCreate, db: Session = Depends(get_db)):
    name = sanitize_input(class_in.name)
    if not name:
        raise InvalidInput("Class name is required")
    cls = Class(name=name)
    db.add(cls)
    db.flush()
    for subject_name in class_in.subjects:
        _add_subject(db, cls, subject_name)
        db.flush()
    db.commit()
    db.refresh(cls)
    return cls


@router.get("/{class_id}", response_model=ClassResponse)
def get_class(class_id: uuid.UUID, db: Session = Depends(get_db)):
    return _get_class_or_404(db, class_id)


@router.patch("/{class_id}", response_model=ClassResponse)
def update_class(
    class_id: uuid.UUID, class_in: ClassUpdate, db: Session = Depends(get_db)
):
    cls = _get_class_or_404(db, class_id)
    name = sanitize_input(class_in.name)
    if not name:
        raise InvalidInput("Class name is required")
    cls.name = name
    db.commit()
    db.refresh(cls)
    return cls


@router.delete("/{class_id}")
def delete_class(class_id: uuid.UUID, db: Session = Depends(get_db)):
    cls = _get_class_or_404(db, class_id)
    unassigned = (
        db.query(Student)
        .filter(Student.class_id == class_id)
        .update({Student.class_id: None}, synchronize_session="fetch")
    )
    exam_count = len(cls.exams)
    # Exams (and their marks) and subjects are removed with the class
    db.delete(cls)
    db.commit()
    logger.info(
        "Deleted class %s: %d exams removed, %d students unassigned",
        class_id, exam_count, unassigned,
    )
    return {"message": "Class deleted successfully"}


# Subjects


@router.post("/{class_id}/subjects", response_model=ClassResponse, status_code=201)
def add_subject(
    class_id: uuid.UUID, subject_in: SubjectCreate, db: Session = Depends(get_db)
):
    cls = _get_class_or_404(db, class_id)
    _add_subject(db, cls, subject_in.name)
    db.commit()
    db.refresh(cls)
    return cls


@router.delete("/{class_id}/subjects/{subject_id}", response_model=ClassResponse)
def remove_subject(
    class_id: uuid.UUID, subject_id: uuid.UUID, db: Session = Depends(get_db)
):
    cls = _get_class_or_404(db, class_id)
    subject = next((s for s in cls.subjects if s.id == subject_id), None)
    if not subject:
        raise NotFound("Subject not found")
    # Marks already written for this subject stay in the table but are no
    # longer part of any result.
    cls.subjects.remove(subject)
    db.commit()
    db.refresh(cls)
    return cls
