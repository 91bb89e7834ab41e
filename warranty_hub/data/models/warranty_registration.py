# warranty_hub/data/models/warranty_registration.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from warranty_hub.data.database import Base


class WarrantyRegistrationModel(Base):
    __tablename__ = "warranty_registrations"

    id = Column(Integer, primary_key=True)
    serial_number_id = Column(Integer, ForeignKey("serial_numbers.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone = Column(String(64), nullable=False)

    status = Column(String(16), nullable=False, default="pending")  # pending, accepted, rejected
    registered_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
