import uuid

import pandas as pd
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.errors import MarkValidationError, StoreUnavailable
from app.models import Mark, Subject
from app.services.marks import import_marks_sheet, set_mark
from app.services.store import EntityStore
from conftest import subject_named


def marks_for(store, exam):
    return {(m.student_id, m.exam_id, m.subject_id): m.marks for m in store.get_marks(exam.id)}


def test_set_mark_round_trip(db, class_10a, student_1001, midterm):
    store = EntityStore(db)
    math = subject_named(class_10a, "Math")

    set_mark(store, 1001, midterm.id, math.id, 77)
    assert marks_for(store, midterm)[(1001, midterm.id, math.id)] == 77

    set_mark(store, 1001, midterm.id, math.id, None)
    assert marks_for(store, midterm)[(1001, midterm.id, math.id)] is None


def test_set_mark_overwrites_single_row(db, class_10a, student_1001, midterm):
    store = EntityStore(db)
    math = subject_named(class_10a, "Math")

    set_mark(store, 1001, midterm.id, math.id, 40)
    set_mark(store, 1001, midterm.id, math.id, 45)

    assert db.query(Mark).count() == 1
    assert db.query(Mark).one().marks == 45


@pytest.mark.parametrize("value", [0, 100])
def test_boundary_marks_accepted(db, class_10a, student_1001, midterm, value):
    mark = set_mark(EntityStore(db), 1001, midterm.id, subject_named(class_10a, "Math").id, value)
    assert mark.marks == value


@pytest.mark.parametrize("value", [-1, 101, True, 55.5, "80"])
def test_out_of_range_marks_rejected(db, class_10a, student_1001, midterm, value):
    with pytest.raises(MarkValidationError):
        set_mark(EntityStore(db), 1001, midterm.id, subject_named(class_10a, "Math").id, value)
    assert db.query(Mark).count() == 0


def test_unknown_exam_rejected(db, class_10a, student_1001):
    with pytest.raises(MarkValidationError):
        set_mark(EntityStore(db), 1001, uuid.uuid4(), subject_named(class_10a, "Math").id, 50)


def test_subject_from_another_class_rejected(db, class_10a, student_1001, midterm):
    with pytest.raises(MarkValidationError):
        set_mark(EntityStore(db), 1001, midterm.id, uuid.uuid4(), 50)


def test_removed_subject_rejected(db, class_10a, student_1001, midterm):
    science = subject_named(class_10a, "Science")
    science_id = science.id
    class_10a.subjects.remove(science)
    db.commit()

    with pytest.raises(MarkValidationError):
        set_mark(EntityStore(db), 1001, midterm.id, science_id, 50)


def test_unknown_student_rejected(db, class_10a, midterm):
    with pytest.raises(MarkValidationError):
        set_mark(EntityStore(db), 4242, midterm.id, subject_named(class_10a, "Math").id, 50)


def test_marks_of_unpublished_exam_are_writable(db, class_10a, student_1001, midterm):
    midterm.is_published = False
    db.commit()

    mark = set_mark(EntityStore(db), 1001, midterm.id, subject_named(class_10a, "Math").id, 64)
    assert mark.marks == 64


def test_import_marks_sheet(db, class_10a, student_1001, midterm):
    df = pd.DataFrame({
        "student_id": ["1001", "9999", ""],
        "math": ["88", "50", "10"],
        "Science": ["", "50", "10"],
        "Art": ["1", "2", "3"],
    })
    store = EntityStore(db)

    written, errors = import_marks_sheet(store, midterm.id, df)

    assert written == 2
    recorded = marks_for(store, midterm)
    assert recorded[(1001, midterm.id, subject_named(class_10a, "Math").id)] == 88
    assert recorded[(1001, midterm.id, subject_named(class_10a, "Science").id)] is None
    assert {"column": "Art", "message": "Unknown subject"} in errors
    assert {"row": 4, "column": "student_id", "message": "Invalid student id"} in errors
    assert sum(1 for e in errors if e.get("row") == 3) == 2


def test_import_rejects_bad_cells(db, class_10a, student_1001, midterm):
    df = pd.DataFrame({"student_id": ["1001"], "Math": ["120"], "Science": ["abc"]})

    written, errors = import_marks_sheet(EntityStore(db), midterm.id, df)

    assert written == 0
    assert [e["column"] for e in errors] == ["Math", "Science"]


def test_import_requires_student_id_column(db, class_10a, midterm):
    with pytest.raises(MarkValidationError):
        import_marks_sheet(EntityStore(db), midterm.id, pd.DataFrame({"Math": ["1"]}))


def test_import_failure_part_way_writes_nothing(db, class_10a, student_1001, midterm, monkeypatch):
    real_stage = EntityStore._stage_mark
    calls = []

    def drop_connection_on_second_cell(self, *args):
        calls.append(args)
        if len(calls) == 2:
            raise OperationalError("INSERT INTO marks", {}, Exception("connection lost"))
        return real_stage(self, *args)

    monkeypatch.setattr(EntityStore, "_stage_mark", drop_connection_on_second_cell)
    df = pd.DataFrame({"student_id": ["1001"], "Math": ["88"], "Science": ["70"]})

    with pytest.raises(StoreUnavailable):
        import_marks_sheet(EntityStore(db), midterm.id, df)
    assert db.query(Mark).count() == 0


def test_import_checks_students_once(db, class_10a, student_1001, midterm, monkeypatch):
    monkeypatch.setattr(
        EntityStore, "get_student",
        lambda self, student_id: pytest.fail("per-cell student lookup"),
    )
    df = pd.DataFrame({"student_id": ["1001", "1001"], "Math": ["60", "65"], "Science": ["70", ""]})

    written, errors = import_marks_sheet(EntityStore(db), midterm.id, df)

    assert (written, errors) == (4, [])
    recorded = marks_for(EntityStore(db), midterm)
    assert recorded[(1001, midterm.id, subject_named(class_10a, "Math").id)] == 65
    assert recorded[(1001, midterm.id, subject_named(class_10a, "Science").id)] is None


def test_import_ignores_out_of_range_student_ids(db, class_10a, student_1001, midterm):
    df = pd.DataFrame({"student_id": [str(2 ** 63)], "Math": ["50"]})

    written, errors = import_marks_sheet(EntityStore(db), midterm.id, df)

    assert written == 0
    assert errors == [{"row": 2, "column": "Math", "message": "Student not found."}]


def test_insert_retry_that_fails_again_is_rejected(db, class_10a, student_1001, midterm, monkeypatch):
    def always_conflicts(self, *args):
        raise IntegrityError("INSERT INTO marks", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(EntityStore, "_stage_mark", always_conflicts)

    with pytest.raises(MarkValidationError):
        set_mark(EntityStore(db), 1001, midterm.id, subject_named(class_10a, "Math").id, 50)
    assert db.query(Mark).count() == 0


def test_out_of_range_student_id_is_absent(db):
    assert EntityStore(db).get_student(2 ** 63) is None
