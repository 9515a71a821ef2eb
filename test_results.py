from datetime import date
from decimal import Decimal
import time

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import NotFound, StoreUnavailable
from app.models import Exam, Mark, Student, Subject
from app.services.results import compute_percentage, compute_result, select_published_exam
from app.services.store import EntityStore
from conftest import subject_named

DOB = date(2010, 5, 1)


def write_marks(db, student, exam, cls, **values):
    for name, value in values.items():
        db.add(Mark(
            student_id=student.id,
            exam_id=exam.id,
            subject_id=subject_named(cls, name).id,
            marks=value,
        ))
    db.commit()


def test_all_subjects_perfect(db, class_10a, student_1001, midterm):
    write_marks(db, student_1001, midterm, class_10a, Math=100, Science=100)

    result = compute_result(EntityStore(db), 1001, DOB)

    assert result.exam.id == midterm.id
    assert result.total_marks == 200
    assert result.percentage == Decimal("100")
    assert result.all_subjects_perfect is True
    assert [(m.subject_name, m.marks) for m in result.marks] == [("Math", 100), ("Science", 100)]


def test_missing_mark_is_not_graded(db, class_10a, student_1001, midterm):
    write_marks(db, student_1001, midterm, class_10a, Math=100)

    result = compute_result(EntityStore(db), 1001, DOB)

    assert result.total_marks == 100
    assert result.percentage == Decimal("50")
    assert result.all_subjects_perfect is False
    assert [(m.subject_name, m.marks) for m in result.marks] == [("Math", 100), ("Science", None)]


def test_unpublished_exam_is_not_found(db, class_10a, student_1001, midterm):
    write_marks(db, student_1001, midterm, class_10a, Math=100, Science=100)
    midterm.is_published = False
    db.commit()

    with pytest.raises(NotFound):
        compute_result(EntityStore(db), 1001, DOB)


@pytest.mark.parametrize("student_id, dob", [
    (1001, date(2010, 5, 2)),
    (1002, DOB),
])
def test_wrong_id_or_dob_is_not_found(db, student_1001, midterm, student_id, dob):
    with pytest.raises(NotFound) as excinfo:
        compute_result(EntityStore(db), student_id, dob)
    assert excinfo.value.detail == "No result found"


def test_student_without_class_is_not_found(db, student_1001, midterm):
    student_1001.class_id = None
    db.commit()

    with pytest.raises(NotFound):
        compute_result(EntityStore(db), 1001, DOB)


def test_latest_published_exam_wins(db, class_10a, student_1001, midterm):
    final = Exam(name="Final", date=date(2024, 6, 1), class_id=class_10a.id, is_published=True)
    later_draft = Exam(name="Retest", date=date(2024, 9, 1), class_id=class_10a.id, is_published=False)
    db.add_all([final, later_draft])
    db.commit()

    result = compute_result(EntityStore(db), 1001, DOB)

    assert result.exam.name == "Final"


def test_same_date_exams_break_tie_on_id(db, class_10a):
    first = Exam(name="A", date=date(2024, 1, 1), class_id=class_10a.id, is_published=True)
    second = Exam(name="B", date=date(2024, 1, 1), class_id=class_10a.id, is_published=True)
    db.add_all([first, second])
    db.commit()

    expected = max([first, second], key=lambda e: str(e.id))
    assert select_published_exam([first, second]) is expected
    assert select_published_exam([second, first]) is expected


def test_subject_added_after_marking_shows_not_graded(db, class_10a, student_1001, midterm):
    write_marks(db, student_1001, midterm, class_10a, Math=80, Science=60)
    class_10a.subjects.append(Subject(name="English", position=2))
    db.commit()

    result = compute_result(EntityStore(db), 1001, DOB)

    assert [(m.subject_name, m.marks) for m in result.marks] == [
        ("Math", 80), ("Science", 60), ("English", None),
    ]
    assert result.total_marks == 140
    assert result.percentage == Decimal("46.67")


def test_removed_subject_drops_out_of_result(db, class_10a, student_1001, midterm):
    write_marks(db, student_1001, midterm, class_10a, Math=100, Science=40)
    class_10a.subjects.remove(subject_named(class_10a, "Science"))
    db.commit()

    result = compute_result(EntityStore(db), 1001, DOB)

    assert [m.subject_name for m in result.marks] == ["Math"]
    assert result.total_marks == 100
    assert result.all_subjects_perfect is True


def test_class_without_subjects_scores_zero(db, class_10a, student_1001, midterm):
    class_10a.subjects.clear()
    db.commit()

    result = compute_result(EntityStore(db), 1001, DOB)

    assert result.marks == []
    assert result.percentage == Decimal("0")
    assert result.all_subjects_perfect is False


def test_marks_of_other_students_are_ignored(db, class_10a, student_1001, midterm):
    other = Student(id=1002, name="Ravi", dob=date(2010, 1, 1), class_id=class_10a.id)
    db.add(other)
    db.commit()
    write_marks(db, other, midterm, class_10a, Math=10, Science=10)
    write_marks(db, student_1001, midterm, class_10a, Math=90)

    result = compute_result(EntityStore(db), 1001, DOB)

    assert result.total_marks == 90


def test_lookup_is_repeatable(db, class_10a, student_1001, midterm):
    write_marks(db, student_1001, midterm, class_10a, Math=73, Science=None)
    store = EntityStore(db)

    assert compute_result(store, 1001, DOB) == compute_result(store, 1001, DOB)


def test_percentage_rounding():
    assert compute_percentage(0, 0) == Decimal("0.00")
    assert compute_percentage(200, 3) == Decimal("66.67")
    assert compute_percentage(1, 8) == Decimal("0.13")  # 0.125 rounds half up
    assert str(compute_percentage(150, 2)) == "75.00"


def test_expired_deadline_is_unavailable_not_missing(db, student_1001, midterm):
    store = EntityStore(db, timeout=0.001)
    time.sleep(0.01)

    with pytest.raises(StoreUnavailable):
        compute_result(store, 1001, DOB)


class BrokenSession:
    def get(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def rollback(self):
        pass


def test_connection_failure_is_unavailable():
    with pytest.raises(StoreUnavailable):
        compute_result(EntityStore(BrokenSession()), 1001, DOB)
