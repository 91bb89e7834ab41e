from typing import List

from sqlalchemy import select

from warranty_hub.data.models.contact_message import ContactMessageModel
from warranty_hub.repos.base import BaseRepo


class ContactRepo(BaseRepo):

    def create(self, message: ContactMessageModel) -> ContactMessageModel:
        self.db.add(message)
        self.db.flush()
        return message

    def list_all(self) -> List[ContactMessageModel]:
        return list(
            self.db.execute(
                select(ContactMessageModel).order_by(ContactMessageModel.created_at.desc(), ContactMessageModel.id.desc())
            ).scalars()
        )
