import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import InvalidInput
from app.core.security import sanitize_input
from app.models.exams import Exam
from app.models.lms import Class
from app.models.users import Student
from app.models.website import PortalConfig
from app.schemas.dashboard import DashboardStatsResponse
from app.schemas.exams import ResultLookup, ResultResponse
from app.schemas.website import CollegeName
from app.services.results import compute_result
from app.services.store import EntityStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_config(db: Session) -> PortalConfig:
    config = db.query(PortalConfig).first()
    if not config:
        # Create a default config if none exists
        config = PortalConfig(college_name=settings.COLLEGE_NAME)
        db.add(config)
        db.commit()
        db.refresh(config)
    return config


# Public


@router.post("/result", response_model=ResultResponse)
def find_result(lookup: ResultLookup, store: EntityStore = Depends(deps.get_store)):
    """
    Published result for a student ID and date of birth. Every failed lookup
    answers with the same 404.
    """
    result = compute_result(store, lookup.student_id, lookup.dob)
    return ResultResponse.from_result(result)


@router.get("/college-name", response_model=CollegeName)
def get_college_name(db: Session = Depends(get_db)):
    return {"name": _get_config(db).college_name}


# Admin


@router.put(
    "/college-name",
    response_model=CollegeName,
    dependencies=[Depends(deps.get_current_admin)],
)
def set_college_name(data: CollegeName, db: Session = Depends(get_db)):
    name = sanitize_input(data.name)
    if not name:
        raise InvalidInput("College name cannot be empty")
    config = _get_config(db)
    config.college_name = name
    db.commit()
    logger.info("College name changed to %r", name)
    return {"name": config.college_name}


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    dependencies=[Depends(deps.get_current_admin)],
)
def get_dashboard_stats(db: Session = Depends(get_db)):
    return DashboardStatsResponse(
        total_students=db.query(Student).count(),
        total_classes=db.query(Class).count(),
        total_exams=db.query(Exam).count(),
        published_results=db.query(Exam).filter(Exam.is_published == True).count(),
    )
