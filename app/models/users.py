from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Student(Base):
    __tablename__ = "students"
    # Student IDs are shown to students and printed on certificates, so a
    # deleted student's ID must never be handed out again.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    dob = Column(Date, nullable=False)
    profile_picture_url = Column(String)

    class_id = Column(Uuid, ForeignKey("classes.id"), nullable=True, index=True)

    class_ = relationship("app.models.lms.Class", back_populates="students")
    marks = relationship(
        "app.models.exams.Mark", back_populates="student", cascade="all, delete-orphan"
    )

    created_at = Column(DateTime, server_default=func.now())
