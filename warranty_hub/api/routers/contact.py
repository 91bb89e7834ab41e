# warranty_hub/api/routers/contact.py
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from warranty_hub.api.deps import get_notification_service, require_admin
from warranty_hub.data.database import get_db
from warranty_hub.domain.schemas import ContactIn, ContactCreatedOut, ContactOut
from warranty_hub.services.contact_service import ContactService
from warranty_hub.services.notification_service import NotificationService

router = APIRouter(prefix="/contact", tags=["contact"])


def get_service(db: Session):
    return ContactService(db)


@router.post("", response_model=ContactCreatedOut, status_code=201)
def submit_message(
    payload: ContactIn,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    message = get_service(db).create_message(payload)
    background.add_task(
        notifications.contact_received,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        message=payload.message,
    )
    return {"message": "Contact message received", "id": message.id}


@router.get("", response_model=List[ContactOut], dependencies=[Depends(require_admin)])
def list_messages(db: Session = Depends(get_db)):
    return get_service(db).list_messages()
