from sqlalchemy import Column, String, Float, Boolean, DateTime, Text
from ..database.core import Base
import uuid
from datetime import datetime, timezone

class Address(Base):
    __tablename__ = "addresses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    address_line = Column(Text, nullable=False)
    phone = Column(String, nullable=False)
    pincode = Column(String, nullable=False)
    delivery_instructions = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
