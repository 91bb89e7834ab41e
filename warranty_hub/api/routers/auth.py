# warranty_hub/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warranty_hub.api.deps import http_error
from warranty_hub.data.database import get_db
from warranty_hub.domain.errors import ServiceError
from warranty_hub.domain.schemas import LoginIn, TokenOut
from warranty_hub.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(db: Session):
    return AuthService(db)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    """
    Logowanie administratora. Zwraca token Bearer (JWT).
    """
    svc = get_service(db)
    try:
        return {"token": svc.login(payload.email, payload.password)}
    except ServiceError as e:
        raise http_error(e)
