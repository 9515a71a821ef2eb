import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.core import security
from app.core.config import settings
from app.core.errors import AccountLocked
from app.models.auth import AdminUser

logger = logging.getLogger(__name__)


def authenticate_admin(db: Session, username: str, password: str) -> Optional[AdminUser]:
    admin = db.query(AdminUser).filter(AdminUser.username == username).first()
    if not admin or not admin.is_active:
        logger.info("Login attempt for unknown or inactive admin %r", username)
        return None

    # Check Lockout
    if admin.locked_until and admin.locked_until > datetime.utcnow():
        raise AccountLocked(
            f"Account locked. Try again after {admin.locked_until.strftime('%H:%M:%S')}"
        )

    if not security.verify_password(password, admin.password_hash):
        admin.failed_login_attempts = (admin.failed_login_attempts or 0) + 1
        if admin.failed_login_attempts >= settings.MAX_FAILED_LOGINS:
            admin.locked_until = datetime.utcnow() + timedelta(minutes=settings.LOCKOUT_MINUTES)
            db.commit()
            logger.warning("Admin %r locked after %d failed logins", username, admin.failed_login_attempts)
            raise AccountLocked(
                f"Account locked due to multiple failed attempts. Try again in {settings.LOCKOUT_MINUTES} minutes."
            )
        db.commit()
        logger.info("Failed login for admin %r", username)
        return None

    # Success: Reset attempts
    admin.failed_login_attempts = 0
    admin.locked_until = None
    admin.last_login = datetime.utcnow()
    db.commit()
    return admin


def check_password(db: Session, password: str, username: Optional[str] = None) -> Optional[str]:
    """Return a bearer token when the password is correct, otherwise None."""
    admin = authenticate_admin(db, username or settings.ADMIN_USERNAME, password)
    if admin is None:
        return None
    logger.info("Admin %r logged in", admin.username)
    return security.create_access_token(admin.username)


def ensure_admin(db: Session, username: str, password: str) -> AdminUser:
    """Create the admin account, or reset its password if it already exists."""
    admin = db.query(AdminUser).filter(AdminUser.username == username).first()
    if admin is None:
        admin = AdminUser(username=username, is_active=True)
        db.add(admin)
    admin.password_hash = security.get_password_hash(password)
    admin.failed_login_attempts = 0
    admin.locked_until = None
    db.commit()
    db.refresh(admin)
    return admin
