# warranty_hub/data/models/contact_message.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime

from warranty_hub.data.database import Base


class ContactMessageModel(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
