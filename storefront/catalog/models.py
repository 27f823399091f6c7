from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from ..database.core import Base
import uuid
from datetime import datetime, timezone

class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, index=True)
    short_desc = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    mrp = Column(Float, nullable=True)  # list price shown struck through
    image_url = Column(String, nullable=True)
    # Decremented only through utils.update_inventory.decrement_stock
    stock_value = Column(Integer, nullable=False, default=0)
    # Hidden products drop out of the customer-facing cart join
    user_visibility = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    inventory = relationship("StoreInventory", back_populates="product")

class StoreInventory(Base):
    __tablename__ = "store_inventory"

    id = Column(Integer, primary_key=True, autoincrement=True)
    store_id = Column(String(36), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)

    product = relationship("Product", back_populates="inventory")
