from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.core.database import get_db
from app.core.errors import Unauthorized
from app.models.auth import AdminUser
from app.schemas.auth import Token, Login, AdminResponse
from app.services.auth import check_password

router = APIRouter()


@router.post("/login", response_model=Token)
def login_access_token(login: Login, db: Session = Depends(get_db)) -> Any:
    """
    Check the admin password and issue a bearer token for the admin API
    """
    token = check_password(db, login.password, username=login.username)
    if token is None:
        raise Unauthorized("Invalid username or password")
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=AdminResponse)
def read_current_admin(current_admin: AdminUser = Depends(deps.get_current_admin)):
    return current_admin
