from pydantic import BaseModel, Field, computed_field
from typing import List, Optional
from datetime import datetime

from ..core.config import settings
from ..utils.order_utils import get_status_variant

ORDER_STATUS_PATTERN = r"^(pending|processing|delivered|cancelled|failed|hold)$"

class PlaceOrderRequest(BaseModel):
    address_id: str = Field(..., min_length=1)
    payment_mode: str = Field(settings.DEFAULT_PAYMENT_MODE, pattern=r"^(cod|online)$")

class PlaceOrderResponse(BaseModel):
    order_id: str

class OrderSnapshotItem(BaseModel):
    product_id: str
    name: Optional[str] = None
    price: float
    quantity: int

class OrderItemResponse(BaseModel):
    id: int
    product_id: str
    quantity: int
    price_each: float

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    id: str
    items: List[OrderSnapshotItem]
    total_amount: float
    address_line: str
    phone: str
    pincode: str
    delivery_instructions: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    payment_mode: str
    status: str
    created_at: Optional[datetime] = None
    order_items: List[OrderItemResponse] = []

    @computed_field
    @property
    def status_variant(self) -> str:
        return get_status_variant(self.status)

    class Config:
        from_attributes = True

class OrderListResponse(BaseModel):
    orders: List[OrderResponse]
    total: int
    skip: int
    limit: int

class OrderStatusUpdate(BaseModel):
    status: str = Field(..., pattern=ORDER_STATUS_PATTERN)
