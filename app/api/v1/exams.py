import io
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, UploadFile, File
from sqlalchemy.orm import Session
import pandas as pd
import uuid

from app.api import deps
from app.core.database import get_db
from app.core.errors import NotFound, InvalidInput
from app.core.security import sanitize_input, validate_file_extension
from app.models.exams import Exam, Mark
from app.models.lms import Class
from app.models.users import Student
from app.schemas.exams import (
    ExamCreate,
    ExamUpdate,
    ExamResponse,
    MarksSheetResponse,
    MarksSheetRow,
    MarksImportResponse,
)
from app.schemas.lms import SubjectResponse
from app.services.marks import import_marks_sheet
from app.services.store import EntityStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_exam_or_404(db: Session, exam_id: uuid.UUID) -> Exam:
    exam = db.get(Exam, exam_id)
    if not exam:
        raise NotFound("Exam not found")
    return exam


def _set_published(db: Session, exam: Exam, published: bool) -> Exam:
    if exam.is_published != published:
        exam.is_published = published
        db.commit()
        db.refresh(exam)
        logger.info(
            "Exam %s (%s) %s", exam.id, exam.name, "published" if published else "unpublished"
        )
    return exam


@router.get("", response_model=List[ExamResponse])
def get_exams(class_id: Optional[uuid.UUID] = None, db: Session = Depends(get_db)):
    query = db.query(Exam)
    if class_id is not None:
        query = query.filter(Exam.class_id == class_id)
    return query.order_by(Exam.date.desc(), Exam.name).all()


@router.post("", response_model=ExamResponse, status_code=201)
def create_exam(exam_in: ExamCreate, db: Session = Depends(get_db)):
    name = sanitize_input(exam_in.name)
    if not name:
        raise InvalidInput("Exam name is required")
    if db.get(Class, exam_in.class_id) is None:
        raise InvalidInput("Class not found")
    # New exams always start hidden from the public portal
    exam = Exam(name=name, date=exam_in.date, class_id=exam_in.class_id, is_published=False)
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam


@router.get("/{exam_id}", response_model=ExamResponse)
def get_exam(exam_id: uuid.UUID, db: Session = Depends(get_db)):
    return _get_exam_or_404(db, exam_id)


@router.patch("/{exam_id}", response_model=ExamResponse)
def update_exam(exam_id: uuid.UUID, exam_in: ExamUpdate, db: Session = Depends(get_db)):
    exam = _get_exam_or_404(db, exam_id)
    update_data = exam_in.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = sanitize_input(update_data["name"] or "")
        if not name:
            raise InvalidInput("Exam name is required")
        exam.name = name
    if update_data.get("date") is not None:
        exam.date = update_data["date"]
    db.commit()
    if update_data.get("is_published") is not None:
        _set_published(db, exam, update_data["is_published"])
    db.refresh(exam)
    return exam


@router.delete("/{exam_id}")
def delete_exam(exam_id: uuid.UUID, db: Session = Depends(get_db)):
    exam = _get_exam_or_404(db, exam_id)
    db.delete(exam)
    db.commit()
    return {"message": "Exam deleted successfully"}


@router.post("/{exam_id}/publish", response_model=ExamResponse)
def publish_exam(exam_id: uuid.UUID, db: Session = Depends(get_db)):
    return _set_published(db, _get_exam_or_404(db, exam_id), True)


@router.post("/{exam_id}/unpublish", response_model=ExamResponse)
def unpublish_exam(exam_id: uuid.UUID, db: Session = Depends(get_db)):
    return _set_published(db, _get_exam_or_404(db, exam_id), False)


@router.get("/{exam_id}/marks-sheet", response_model=MarksSheetResponse)
def get_marks_sheet(exam_id: uuid.UUID, db: Session = Depends(get_db)):
    """Marks grid for every student currently in the exam's class.

    Columns follow the class's current subjects, so a subject added after
    marking started shows up with empty cells.
    """
    exam = _get_exam_or_404(db, exam_id)
    subjects = exam.class_.subjects
    students = (
        db.query(Student).filter(Student.class_id == exam.class_id).order_by(Student.id).all()
    )
    recorded = {
        (m.student_id, m.subject_id): m.marks
        for m in db.query(Mark).filter(Mark.exam_id == exam.id).all()
    }
    rows = [
        MarksSheetRow(
            student_id=student.id,
            student_name=student.name,
            marks={str(s.id): recorded.get((student.id, s.id)) for s in subjects},
        )
        for student in students
    ]
    return MarksSheetResponse(
        exam=ExamResponse.model_validate(exam),
        subjects=[SubjectResponse.model_validate(s) for s in subjects],
        rows=rows,
    )


@router.post("/{exam_id}/marks/import", response_model=MarksImportResponse)
def import_marks(
    exam_id: uuid.UUID,
    file: UploadFile = File(...),
    store: EntityStore = Depends(deps.get_import_store),
):
    if not validate_file_extension(file.filename, ["csv"]):
        raise InvalidInput("Only CSV files allowed")
    content = file.file.read()
    try:
        df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError):
        raise InvalidInput("Could not read the CSV file")

    if store.get_exam(exam_id) is None:
        raise NotFound("Exam not found")
    written, errors = import_marks_sheet(store, exam_id, df)
    return {"written": written, "errors": errors}
