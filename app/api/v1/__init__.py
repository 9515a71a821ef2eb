from app.api.v1.auth import router as auth_router
from app.api.v1.students import router as students_router
from app.api.v1.classes import router as classes_router
from app.api.v1.exams import router as exams_router
from app.api.v1.marks import router as marks_router
from app.api.v1.portal import router as portal_router

__all__ = [
    "auth_router",
    "students_router",
    "classes_router",
    "exams_router",
    "marks_router",
    "portal_router",
]
