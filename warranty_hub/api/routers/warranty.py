# warranty_hub/api/routers/warranty.py
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.orm import Session

from warranty_hub.api.deps import get_notification_service, http_error, require_admin
from warranty_hub.data.database import get_db
from warranty_hub.domain.errors import ServiceError
from warranty_hub.domain.schemas import (
    RegistrationOut,
    SerialContextOut,
    WarrantyRegisterIn,
    WarrantyRegisteredOut,
    WarrantyStatusIn,
    WarrantyStatusOut,
)
from warranty_hub.services.notification_service import NotificationService
from warranty_hub.services.warranty_service import WarrantyService

router = APIRouter(prefix="/warranty", tags=["warranty"])


def get_service(db: Session):
    return WarrantyService(db)


@router.get("/validate/{serial}", response_model=SerialContextOut)
def validate_serial(serial: str, db: Session = Depends(get_db)):
    """
    Sprawdza serial przed rejestracją: 404 nieznany, 409 już zarejestrowany.
    """
    svc = get_service(db)
    try:
        return svc.validate_serial(serial).model_dump()
    except ServiceError as e:
        raise http_error(e)


@router.post("/register", response_model=WarrantyRegisteredOut, status_code=201)
def register_warranty(
    payload: WarrantyRegisterIn,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Rejestruje gwarancję. Powiadomienia e-mail wysyłane po odpowiedzi.
    """
    svc = get_service(db)
    try:
        result = svc.register(payload)
    except ServiceError as e:
        raise http_error(e)

    background.add_task(
        notifications.warranty_registered,
        user_name=payload.user_name,
        user_email=payload.user_email,
        serial=result["serial"],
        product_name=result["product_name"],
    )
    return {"message": "Warranty registered", "registration_id": result["registration_id"]}


@router.get("/admin", response_model=List[RegistrationOut], dependencies=[Depends(require_admin)])
def list_registrations(db: Session = Depends(get_db)):
    return get_service(db).list_all()


@router.put("/admin/{registration_id}", response_model=WarrantyStatusOut, dependencies=[Depends(require_admin)])
def set_registration_status(
    registration_id: int,
    payload: WarrantyStatusIn,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    accepted | rejected. Odrzucenie zwalnia serial.
    """
    svc = get_service(db)
    try:
        result = svc.set_status(registration_id, payload.status)
        contact = svc.contact_details(registration_id)
    except ServiceError as e:
        raise http_error(e)

    background.add_task(notifications.warranty_status_changed, status=result["status"], **contact)
    return {"message": "Updated", **result}


@router.delete("/admin/{registration_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_registration(registration_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete(registration_id)
    except ServiceError as e:
        raise http_error(e)
    return Response(status_code=204)
