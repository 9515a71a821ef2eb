from sqlalchemy import (
    Column,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    # Gradable subjects are always read from the class at query time
    class_id = Column(Uuid, ForeignKey("classes.id"), nullable=False, index=True)
    is_published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    class_ = relationship("app.models.lms.Class", back_populates="exams")
    marks = relationship("Mark", back_populates="exam", cascade="all, delete-orphan")


class Mark(Base):
    __tablename__ = "marks"
    __table_args__ = (
        CheckConstraint(
            "marks IS NULL OR (marks >= 0 AND marks <= 100)", name="ck_marks_range"
        ),
    )

    student_id = Column(Integer, ForeignKey("students.id"), primary_key=True)
    exam_id = Column(Uuid, ForeignKey("exams.id"), primary_key=True)
    # Not a foreign key: subjects can be removed from a class while marks
    # written against them are kept as orphans.
    subject_id = Column(Uuid, primary_key=True)
    marks = Column(Integer, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    student = relationship("app.models.users.Student", back_populates="marks")
    exam = relationship("Exam", back_populates="marks")
