import logging
from typing import List
from fastapi import APIRouter, Depends
import uuid

from app.api import deps
from app.core.errors import NotFound, MarkValidationError
from app.schemas.exams import MarkUpdate, MarkResponse
from app.services.marks import set_mark
from app.services.store import EntityStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/exam/{exam_id}", response_model=List[MarkResponse])
def get_marks_for_exam(exam_id: uuid.UUID, store: EntityStore = Depends(deps.get_store)):
    # Admin view: unpublished exams are readable here
    if store.get_exam(exam_id) is None:
        raise NotFound("Exam not found")
    return store.get_marks(exam_id)


@router.post("", response_model=MarkResponse)
def update_mark(mark_in: MarkUpdate, store: EntityStore = Depends(deps.get_store)):
    try:
        return set_mark(
            store, mark_in.student_id, mark_in.exam_id, mark_in.subject_id, mark_in.marks
        )
    except MarkValidationError as exc:
        logger.info(
            "Rejected mark for student %s exam %s subject %s: %s",
            mark_in.student_id, mark_in.exam_id, mark_in.subject_id, exc.detail,
        )
        raise
