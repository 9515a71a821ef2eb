from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import uuid

from app.core.database import get_db
from app.core.errors import NotFound, InvalidInput
from app.core.security import sanitize_input
from app.models.lms import Class
from app.models.users import Student
from app.schemas.users import StudentCreate, StudentUpdate, StudentResponse
from app.services.store import is_storable_student_id

router = APIRouter()


def _get_student_or_404(db: Session, student_id: int) -> Student:
    student = db.get(Student, student_id) if is_storable_student_id(student_id) else None
    if not student:
        raise NotFound("Student not found")
    return student


def _check_class(db: Session, class_id: Optional[uuid.UUID]):
    if class_id is not None and db.get(Class, class_id) is None:
        raise InvalidInput("Class not found")


@router.get("", response_model=List[StudentResponse])
def get_students(class_id: Optional[uuid.UUID] = None, db: Session = Depends(get_db)):
    query = db.query(Student)
    if class_id is not None:
        query = query.filter(Student.class_id == class_id)
    return query.order_by(Student.id).all()


@router.post("", response_model=StudentResponse, status_code=201)
def create_student(student_in: StudentCreate, db: Session = Depends(get_db)):
    name = sanitize_input(student_in.name)
    if not name:
        raise InvalidInput("Student name is required")
    _check_class(db, student_in.class_id)

    student = Student(**student_in.model_dump())
    student.name = name
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(student_id: int, db: Session = Depends(get_db)):
    return _get_student_or_404(db, student_id)


@router.put("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: int, student_in: StudentUpdate, db: Session = Depends(get_db)
):
    student = _get_student_or_404(db, student_id)
    update_data = student_in.model_dump(exclude_unset=True)
    if "name" in update_data:
        update_data["name"] = sanitize_input(update_data["name"] or "")
        if not update_data["name"]:
            raise InvalidInput("Student name is required")
    if update_data.get("dob", student.dob) is None:
        raise InvalidInput("Date of birth is required")
    # An explicit null unassigns the student from their class
    if "class_id" in update_data:
        _check_class(db, update_data["class_id"])

    for field, value in update_data.items():
        setattr(student, field, value)
    db.commit()
    db.refresh(student)
    return student


@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student = _get_student_or_404(db, student_id)
    # Marks go with the student; the ID is never reassigned
    db.delete(student)
    db.commit()
    return {"message": "Student deleted successfully"}
