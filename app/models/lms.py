from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    Integer,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


class Class(Base):
    __tablename__ = "classes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # Insertion order is the display and report order
    subjects = relationship(
        "Subject",
        back_populates="class_",
        order_by="Subject.position",
        cascade="all, delete-orphan",
    )
    students = relationship("app.models.users.Student", back_populates="class_")
    exams = relationship(
        "app.models.exams.Exam", back_populates="class_", cascade="all, delete-orphan"
    )


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    class_id = Column(Uuid, ForeignKey("classes.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    class_ = relationship("Class", back_populates="subjects")
