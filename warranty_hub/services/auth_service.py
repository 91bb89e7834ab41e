# warranty_hub/services/auth_service.py
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError
from sqlalchemy.orm import Session

from warranty_hub.data.models.admin_user import AdminUserModel
from warranty_hub.domain.errors import Unauthorized
from warranty_hub.domain.schemas import AdminIdentity
from warranty_hub.repos.admin_repo import AdminRepo
from warranty_hub.utils.settings import JWT_SECRET, JWT_EXPIRES_SECONDS
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def issue_token(admin_id: int, email: str, expires_in: int = JWT_EXPIRES_SECONDS, secret: str = JWT_SECRET) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": admin_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, secret: str = JWT_SECRET) -> AdminIdentity:
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
        return AdminIdentity(id=payload["id"], email=payload["email"])
    except (jwt.PyJWTError, KeyError):
        raise Unauthorized("Invalid or expired token")


class AuthService:
    """Logowanie administratora i zakładanie kont (seed)."""

    def __init__(self, db: Session):
        self.repo = AdminRepo(db)

    def login(self, email: str, password: str) -> str:
        admin = self.repo.get_by_email(email)
        if not admin or not verify_password(password, admin.password_hash):
            logger.warning(f"Failed admin login for {email}")
            raise Unauthorized("Invalid credentials")
        return issue_token(admin.id, admin.email)

    def ensure_admin(self, email: str, password: str) -> AdminUserModel:
        existing = self.repo.get_by_email(email)
        if existing:
            return existing
        admin = self.repo.create(AdminUserModel(email=email, password_hash=hash_password(password)))
        self.repo.commit()
        logger.info(f"Admin account {email} created")
        return admin
