import logging
import time
from contextlib import contextmanager
from typing import Iterable, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session

from app.core.errors import MarkValidationError, StoreUnavailable
from app.models.exams import Exam, Mark
from app.models.lms import Class
from app.models.users import Student

logger = logging.getLogger(__name__)

# Largest value the students.id INTEGER column holds on Postgres
MAX_STUDENT_ID = 2_147_483_647


def is_storable_student_id(student_id) -> bool:
    return isinstance(student_id, int) and 1 <= student_id <= MAX_STUDENT_ID


class EntityStore:
    """Read/write access to students, classes, exams and marks.

    All calls made through one store share a single deadline, computed from
    ``timeout`` when the store is created. Once it passes, or when the
    database connection fails, calls raise ``StoreUnavailable`` so callers can
    tell a transient failure apart from a missing record.
    """

    def __init__(self, db: Session, timeout: Optional[float] = None):
        self.db = db
        self.deadline = time.monotonic() + timeout if timeout else None

    def _remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def _apply_statement_timeout(self, remaining: float):
        if self.db.get_bind().dialect.name != "postgresql":
            return
        # SET does not accept bound parameters
        self.db.execute(text(f"SET LOCAL statement_timeout = {max(int(remaining * 1000), 1)}"))

    @contextmanager
    def _guard(self, operation: str):
        remaining = self._remaining()
        if remaining is not None and remaining <= 0:
            logger.warning("Store deadline passed before %s", operation)
            raise StoreUnavailable()
        try:
            if remaining is not None:
                self._apply_statement_timeout(remaining)
            yield
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            logger.error("Store failure during %s: %s", operation, exc)
            self.db.rollback()
            raise StoreUnavailable() from exc

    def get_student(self, student_id: int) -> Optional[Student]:
        if not is_storable_student_id(student_id):
            return None
        with self._guard("get_student"):
            return self.db.get(Student, student_id)

    def existing_student_ids(self, student_ids: Iterable[int]) -> Set[int]:
        wanted = {i for i in student_ids if is_storable_student_id(i)}
        if not wanted:
            return set()
        with self._guard("existing_student_ids"):
            rows = self.db.query(Student.id).filter(Student.id.in_(wanted)).all()
            return {row[0] for row in rows}

    def get_class(self, class_id: UUID) -> Optional[Class]:
        with self._guard("get_class"):
            return self.db.get(Class, class_id)

    def get_exam(self, exam_id: UUID) -> Optional[Exam]:
        with self._guard("get_exam"):
            return self.db.get(Exam, exam_id)

    def list_exams_for_class(self, class_id: UUID) -> List[Exam]:
        with self._guard("list_exams_for_class"):
            return self.db.query(Exam).filter(Exam.class_id == class_id).all()

    def get_marks(self, exam_id: UUID, student_id: Optional[int] = None) -> List[Mark]:
        with self._guard("get_marks"):
            query = self.db.query(Mark).filter(Mark.exam_id == exam_id)
            if student_id is not None:
                query = query.filter(Mark.student_id == student_id)
            return query.all()

    def upsert_mark(
        self, student_id: int, exam_id: UUID, subject_id: UUID, value: Optional[int]
    ) -> Mark:
        """Insert or overwrite the mark for one (student, exam, subject) key.

        Concurrent writers to the same key resolve as last write wins: if an
        insert loses the race to another insert, it is retried once as an
        update of the row that won. A second failure means the student or
        exam row is gone.
        """
        with self._guard("upsert_mark"):
            try:
                mark = self._stage_mark(student_id, exam_id, subject_id, value)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                try:
                    mark = self._stage_mark(student_id, exam_id, subject_id, value)
                    self.db.commit()
                except IntegrityError:
                    self.db.rollback()
                    raise MarkValidationError("Student not found.")
            self.db.refresh(mark)
            return mark

    def upsert_marks(
        self, entries: Iterable[Tuple[int, UUID, UUID, Optional[int]]]
    ) -> int:
        """Write many marks in one transaction.

        Either every entry is committed or, on any failure, none is.
        """
        written = 0
        with self._guard("upsert_marks"):
            try:
                for student_id, exam_id, subject_id, value in entries:
                    self._stage_mark(student_id, exam_id, subject_id, value)
                    written += 1
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                raise MarkValidationError(
                    "A student on the sheet no longer exists. No marks were written."
                )
            except SQLAlchemyError:
                self.db.rollback()
                raise
        return written

    def _stage_mark(self, student_id, exam_id, subject_id, value) -> Mark:
        mark = self.db.get(Mark, (student_id, exam_id, subject_id))
        if mark is None:
            mark = Mark(
                student_id=student_id, exam_id=exam_id, subject_id=subject_id, marks=value
            )
            self.db.add(mark)
        else:
            mark.marks = value
        self.db.flush()
        return mark
