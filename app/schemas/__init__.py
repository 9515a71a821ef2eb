from app.schemas.users import (
    StudentCreate,
    StudentUpdate,
    StudentResponse,
)
from app.schemas.lms import (
    SubjectCreate,
    SubjectResponse,
    ClassCreate,
    ClassUpdate,
    ClassResponse,
)
from app.schemas.exams import (
    ExamCreate,
    ExamUpdate,
    ExamResponse,
    MarkUpdate,
    MarkResponse,
    MarksSheetResponse,
    MarksImportResponse,
    ResultLookup,
    ResultResponse,
)
from app.schemas.auth import Token, Login, AdminResponse
from app.schemas.website import CollegeName
from app.schemas.dashboard import DashboardStatsResponse
