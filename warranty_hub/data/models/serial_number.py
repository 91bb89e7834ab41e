# warranty_hub/data/models/serial_number.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from warranty_hub.data.database import Base


class SerialNumberModel(Base):
    __tablename__ = "serial_numbers"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    # normalized code, unique across every product
    serial = Column(String(128), nullable=False, unique=True)
    is_used = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
