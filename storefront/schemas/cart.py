from pydantic import BaseModel
from typing import List, Optional

class CartMutationResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    count: int

class CartCountResponse(BaseModel):
    count: int

class CartLineResponse(BaseModel):
    product_id: str
    quantity: int
    name: Optional[str] = None
    price: float
    mrp: Optional[float] = None
    image_url: Optional[str] = None
    stock_value: int
    subtotal: float

class CartResponse(BaseModel):
    items: List[CartLineResponse]
    total_items: int
    total_value: float
