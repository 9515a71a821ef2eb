from typing import Dict, List, Optional
from uuid import UUID
import datetime
from pydantic import BaseModel, StrictInt

from app.schemas.lms import ClassResponse, SubjectResponse
from app.schemas.users import StudentResponse


class ExamBase(BaseModel):
    name: str
    date: datetime.date
    class_id: UUID


class ExamCreate(ExamBase):
    pass


class ExamUpdate(BaseModel):
    name: Optional[str] = None
    date: Optional[datetime.date] = None
    is_published: Optional[bool] = None


class ExamResponse(ExamBase):
    id: UUID
    is_published: bool

    class Config:
        from_attributes = True


class MarkUpdate(BaseModel):
    student_id: int
    exam_id: UUID
    subject_id: UUID
    # "80", 55.0 and true are rejected rather than coerced
    marks: Optional[StrictInt] = None


class MarkResponse(BaseModel):
    student_id: int
    exam_id: UUID
    subject_id: UUID
    marks: Optional[int] = None

    class Config:
        from_attributes = True


class MarksSheetRow(BaseModel):
    student_id: int
    student_name: str
    marks: Dict[str, Optional[int]]  # subject id -> marks


class MarksSheetResponse(BaseModel):
    exam: ExamResponse
    subjects: List[SubjectResponse]
    rows: List[MarksSheetRow]


class MarksImportError(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    message: str


class MarksImportResponse(BaseModel):
    written: int
    errors: List[MarksImportError] = []


# Public portal


class ResultLookup(BaseModel):
    student_id: int
    dob: datetime.date


class SubjectMarkResponse(BaseModel):
    subject_id: UUID
    subject_name: str
    marks: Optional[int] = None


class ResultResponse(BaseModel):
    student: StudentResponse
    exam: ExamResponse
    school_class: ClassResponse
    marks: List[SubjectMarkResponse]
    total_marks: int
    percentage: float
    all_subjects_perfect: bool

    @classmethod
    def from_result(cls, result) -> "ResultResponse":
        return cls(
            student=StudentResponse.model_validate(result.student),
            exam=ExamResponse.model_validate(result.exam),
            school_class=ClassResponse.model_validate(result.school_class),
            marks=[
                SubjectMarkResponse(
                    subject_id=m.subject_id, subject_name=m.subject_name, marks=m.marks
                )
                for m in result.marks
            ],
            total_marks=result.total_marks,
            percentage=float(result.percentage),
            all_subjects_perfect=result.all_subjects_perfect,
        )
