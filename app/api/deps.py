from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core import security
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import Unauthorized
from app.models.auth import AdminUser
from app.services.store import EntityStore

# OAuth2PasswordBearer allows for token extraction from header
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False  # Missing tokens are reported as Unauthorized below
)


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db, timeout=settings.STORE_TIMEOUT_SECONDS)


def get_import_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db, timeout=settings.IMPORT_TIMEOUT_SECONDS)


def get_current_admin(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(reusable_oauth2)
) -> AdminUser:
    if not token:
        raise Unauthorized()

    username = security.decode_access_token(token)
    if username is None:
        raise Unauthorized("Could not validate credentials")

    admin = db.query(AdminUser).filter(AdminUser.username == username).first()
    if not admin or not admin.is_active:
        raise Unauthorized("Could not validate credentials")
    return admin
