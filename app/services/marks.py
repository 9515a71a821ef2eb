import logging
from typing import Any, List, Optional, Tuple
from uuid import UUID

import pandas as pd

from app.core.errors import MarkValidationError
from app.models.exams import Mark
from app.services.store import EntityStore

logger = logging.getLogger(__name__)

MIN_MARK = 0
MAX_MARK = 100


def validate_mark_value(value: Any) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; True must not be stored as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise MarkValidationError("Marks must be a whole number between 0 and 100.")
    if value < MIN_MARK or value > MAX_MARK:
        raise MarkValidationError("Marks must be between 0 and 100.")
    return value


def set_mark(
    store: EntityStore,
    student_id: int,
    exam_id: UUID,
    subject_id: UUID,
    value: Optional[int],
) -> Mark:
    """Write one mark after checking it against the exam's live subjects.

    A subject id that is no longer in the exam's class is rejected rather
    than stored, since such a mark would never be shown.
    """
    value = validate_mark_value(value)

    exam = store.get_exam(exam_id)
    if exam is None:
        raise MarkValidationError("Exam not found.")
    school_class = store.get_class(exam.class_id)
    subject_ids = {subject.id for subject in school_class.subjects} if school_class else set()
    if subject_id not in subject_ids:
        raise MarkValidationError("Subject is not part of this exam's class.")
    if store.get_student(student_id) is None:
        raise MarkValidationError("Student not found.")

    return store.upsert_mark(student_id, exam_id, subject_id, value)


def import_marks_sheet(
    store: EntityStore, exam_id: UUID, df: pd.DataFrame
) -> Tuple[int, List[dict]]:
    """Write every valid cell of a marks sheet in one transaction.

    The sheet has a ``student_id`` column and one column per subject name of
    the exam's class. Blank cells clear the mark. Returns the number of cells
    written and a list of per-cell errors. Invalid cells are reported and
    skipped; the valid ones are committed together, so a store failure part
    way through leaves no marks from the sheet behind.
    """
    exam = store.get_exam(exam_id)
    if exam is None:
        raise MarkValidationError("Exam not found.")
    school_class = store.get_class(exam.class_id)
    subjects = {s.name.strip().lower(): s for s in school_class.subjects} if school_class else {}

    df.columns = [str(c).strip() for c in df.columns]
    if "student_id" not in df.columns:
        raise MarkValidationError("Marks sheet must have a 'student_id' column.")

    errors = []
    subject_columns = []
    for column in df.columns:
        if column == "student_id":
            continue
        subject = subjects.get(column.lower())
        if subject is None:
            errors.append({"column": column, "message": "Unknown subject"})
        else:
            subject_columns.append((column, subject))

    df = df.astype(object).where(pd.notnull(df), None)

    rows = []
    for index, row in df.iterrows():
        # Row numbers as seen in a spreadsheet, after the header
        row_number = int(index) + 2
        try:
            student_id = _as_int(row["student_id"])
        except MarkValidationError:
            student_id = None
        if student_id is None:
            errors.append({"row": row_number, "column": "student_id", "message": "Invalid student id"})
            continue
        rows.append((row_number, student_id, row))

    known_students = store.existing_student_ids(student_id for _, student_id, _ in rows)

    entries = []
    for row_number, student_id, row in rows:
        for column, subject in subject_columns:
            try:
                value = validate_mark_value(_as_int(row[column]))
                if student_id not in known_students:
                    raise MarkValidationError("Student not found.")
            except MarkValidationError as exc:
                errors.append({"row": row_number, "column": column, "message": exc.detail})
                continue
            entries.append((student_id, exam_id, subject.id, value))

    written = store.upsert_marks(entries) if entries else 0

    if errors:
        logger.warning("Marks import for exam %s finished with %d errors", exam_id, len(errors))
    return written, errors


def _as_int(value: Any) -> Optional[int]:
    """Convert a spreadsheet cell to an int mark; blank cells are None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MarkValidationError("Marks must be a whole number between 0 and 100.")
    if not number.is_integer():
        raise MarkValidationError("Marks must be a whole number between 0 and 100.")
    return int(number)
