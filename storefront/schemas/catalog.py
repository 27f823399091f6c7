from pydantic import BaseModel
from typing import Optional

class ProductResponse(BaseModel):
    id: str
    name: str
    short_desc: Optional[str] = None
    description: Optional[str] = None
    price: float
    mrp: Optional[float] = None
    image_url: Optional[str] = None
    stock_value: int

    class Config:
        from_attributes = True
