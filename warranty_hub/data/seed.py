# warranty_hub/data/seed.py
from warranty_hub.data.database import SessionLocal, init_db
from warranty_hub.services.auth_service import AuthService
from warranty_hub.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


def seed():
    init_db()
    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        logger.warning("ADMIN_EMAIL / ADMIN_PASSWORD not set, no admin account seeded")
        return

    db = SessionLocal()
    try:
        # not forcing: existing account is left untouched
        AuthService(db).ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
