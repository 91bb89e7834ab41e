from typing import List

from sqlalchemy.orm import Session

from warranty_hub.data.models.contact_message import ContactMessageModel
from warranty_hub.domain.schemas import ContactIn
from warranty_hub.repos.contact_repo import ContactRepo
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


class ContactService:
    def __init__(self, db: Session):
        self.repo = ContactRepo(db)

    def create_message(self, payload: ContactIn) -> ContactMessageModel:
        message = self.repo.create(
            ContactMessageModel(
                name=payload.name,
                email=payload.email,
                phone=payload.phone,
                message=payload.message,
            )
        )
        self.repo.commit()
        logger.info(f"Contact message {message.id} from {payload.email}")
        return message

    def list_messages(self) -> List[ContactMessageModel]:
        return self.repo.list_all()
