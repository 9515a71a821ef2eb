from app.core.database import Base
from app.models.auth import AdminUser
from app.models.users import Student
from app.models.lms import Class, Subject
from app.models.exams import Exam, Mark
from app.models.website import PortalConfig
