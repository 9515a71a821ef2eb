import os
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "Marks Portal API"
    API_V1_STR: str = "/api/v1"

    # Database
    DATABASE_URL: str = "postgresql://postgres@localhost:5432/marks_db"
    # Deadline applied to every store access made while serving one request
    STORE_TIMEOUT_SECONDS: float = 5.0
    # Marks sheet imports get their own, longer deadline
    IMPORT_TIMEOUT_SECONDS: float = 60.0

    COLLEGE_NAME: str = "Government College"

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "SECRET_KEY_CHANGE_ME_IN_PRODUCTION")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120
    BCRYPT_ROUNDS: int = 12

    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "admin123")
    MAX_FAILED_LOGINS: int = 5
    LOCKOUT_MINUTES: int = 15

    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # portal + admin panel
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


settings = Settings()
