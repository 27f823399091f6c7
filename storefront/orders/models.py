from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship
from ..database.core import Base
import uuid
from datetime import datetime, timezone

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    # Denormalized snapshot of the cart at checkout: [{product_id, name, price, quantity}]
    items = Column(JSON, nullable=False, default=list)
    total_amount = Column(Float, nullable=False)
    # Address fields are copied, not referenced, so later edits don't rewrite history
    address_line = Column(Text, nullable=False)
    phone = Column(String, nullable=False)
    pincode = Column(String, nullable=False)
    delivery_instructions = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    payment_mode = Column(String, nullable=False, default="cod")
    status = Column(String, nullable=False, default="pending")  # pending, processing, delivered, cancelled, failed, hold
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_each = Column(Float, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    order = relationship("Order", back_populates="order_items")
