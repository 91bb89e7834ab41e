# warranty_hub/api/deps.py
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from warranty_hub.domain.errors import ServiceError, Unauthorized
from warranty_hub.domain.schemas import AdminIdentity
from warranty_hub.services.auth_service import verify_token
from warranty_hub.services.image_store import ImageStore
from warranty_hub.services.notification_service import NotificationService

_bearer = HTTPBearer(auto_error=False)
_image_store: ImageStore | None = None


def http_error(e: ServiceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_detail())


def get_image_store() -> ImageStore:
    global _image_store
    if _image_store is None:
        _image_store = ImageStore()
    return _image_store


def get_notification_service() -> NotificationService:
    return NotificationService()


def require_admin(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> AdminIdentity:
    """Bramka dla endpointów administracyjnych: Authorization: Bearer <jwt>."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise http_error(Unauthorized("Missing or invalid token"))
    try:
        return verify_token(credentials.credentials)
    except Unauthorized as e:
        raise http_error(e)
