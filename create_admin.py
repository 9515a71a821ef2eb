from app.core.config import settings
from app.core.database import SessionLocal
from app.services.auth import ensure_admin

db = SessionLocal()

try:
    print(f"Ensuring admin account '{settings.ADMIN_USERNAME}'...")
    admin = ensure_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    print(f"Admin account ready: {admin.username} ({admin.id})")
finally:
    db.close()
