from typing import List
from fastapi import APIRouter, status

from ..auth.service import CurrentUser
from ..database.core import DbSession
from ..schemas.addresses import AddressCreateRequest, AddressResponse
from .service import AddressService

router = APIRouter(prefix="/addresses")

@router.get("/", response_model=List[AddressResponse])
async def list_addresses(current_user: CurrentUser, db: DbSession):
    """User's delivery addresses, default first"""
    return AddressService.list_addresses(db, current_user.user_id)

@router.post("/", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def create_address(address_data: AddressCreateRequest, current_user: CurrentUser, db: DbSession):
    return AddressService.create_address(db, current_user.user_id, address_data)
