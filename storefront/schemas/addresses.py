from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class AddressCreateRequest(BaseModel):
    address_line: str = Field(..., min_length=5, max_length=500)
    phone: str = Field(..., min_length=10, max_length=20)
    pincode: str = Field(..., min_length=3, max_length=12)
    delivery_instructions: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    is_default: bool = False

class AddressResponse(BaseModel):
    id: str
    address_line: str
    phone: str
    pincode: str
    delivery_instructions: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_default: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
