"""Public result computation.

A result is never stored. Each lookup reads the student, the class's live
subject list, the published exam and its marks from the store and derives
totals from scratch, so subjects added or removed after marks were entered
are reflected on the next lookup.
"""
import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence
from uuid import UUID

from app.core.errors import NotFound
from app.models.exams import Exam
from app.models.lms import Class
from app.models.users import Student
from app.services.publication import is_visible
from app.services.store import EntityStore

logger = logging.getLogger(__name__)

MAX_MARKS_PER_SUBJECT = 100
PERCENTAGE_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class SubjectMark:
    subject_id: UUID
    subject_name: str
    marks: Optional[int]  # None means "Not Graded"


@dataclass(frozen=True)
class Result:
    student: Student
    exam: Exam
    school_class: Class
    marks: List[SubjectMark]
    total_marks: int
    percentage: Decimal
    all_subjects_perfect: bool


def select_published_exam(exams: Sequence[Exam]) -> Optional[Exam]:
    """Latest published exam by date; on equal dates the greatest id wins."""
    visible = [exam for exam in exams if is_visible(exam)]
    if not visible:
        return None
    return max(visible, key=lambda exam: (exam.date, str(exam.id)))


def compute_percentage(total_marks: int, subject_count: int) -> Decimal:
    if subject_count == 0:
        return Decimal(0).quantize(PERCENTAGE_PLACES)
    ratio = Decimal(total_marks) * 100 / Decimal(subject_count * MAX_MARKS_PER_SUBJECT)
    return ratio.quantize(PERCENTAGE_PLACES, rounding=ROUND_HALF_UP)


def compute_result(store: EntityStore, student_id: int, dob: datetime.date) -> Result:
    """Build the published result for a student.

    Raises ``NotFound`` for an unknown ID, a date of birth that does not
    match exactly, a student without a class, or a class with no published
    exam. All four look the same to the caller. Store failures propagate as
    ``StoreUnavailable``.
    """
    student = store.get_student(student_id)
    if student is None or student.dob != dob:
        logger.debug("Result lookup rejected for student %s", student_id)
        raise NotFound()
    if student.class_id is None:
        raise NotFound()

    exam = select_published_exam(store.list_exams_for_class(student.class_id))
    if exam is None:
        raise NotFound()

    school_class = store.get_class(student.class_id)
    if school_class is None:
        raise NotFound()

    recorded = {
        mark.subject_id: mark.marks
        for mark in store.get_marks(exam.id, student_id=student.id)
    }
    marks = [
        SubjectMark(subject.id, subject.name, recorded.get(subject.id))
        for subject in school_class.subjects
    ]

    total_marks = sum(m.marks for m in marks if m.marks is not None)
    all_subjects_perfect = bool(marks) and all(
        m.marks == MAX_MARKS_PER_SUBJECT for m in marks
    )

    return Result(
        student=student,
        exam=exam,
        school_class=school_class,
        marks=marks,
        total_marks=total_marks,
        percentage=compute_percentage(total_marks, len(marks)),
        all_subjects_perfect=all_subjects_perfect,
    )
