from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.sql import func
from app.core.database import Base


class PortalConfig(Base):
    __tablename__ = "portal_configs"

    id = Column(Integer, primary_key=True)
    college_name = Column(String, nullable=False)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
