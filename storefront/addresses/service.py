from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from .models import Address
from ..schemas.addresses import AddressCreateRequest

logger = logging.getLogger(__name__)

class AddressService:

    @staticmethod
    def get_address(db: Session, address_id: str, user_id: str) -> Optional[Address]:
        """Get an address by ID (users can only see their own addresses)"""
        return db.query(Address).filter(
            Address.id == address_id,
            Address.user_id == user_id
        ).first()

    @staticmethod
    def list_addresses(db: Session, user_id: str) -> List[Address]:
        """User's addresses, default first"""
        return db.query(Address).filter(Address.user_id == user_id)\
                 .order_by(Address.is_default.desc(), Address.created_at)\
                 .all()

    @staticmethod
    def create_address(db: Session, user_id: str, data: AddressCreateRequest) -> Address:
        """Create an address; the first one (or one flagged is_default) becomes the default"""
        has_addresses = db.query(Address.id).filter(Address.user_id == user_id).first() is not None
        make_default = data.is_default or not has_addresses

        try:
            if make_default and has_addresses:
                db.query(Address).filter(
                    Address.user_id == user_id,
                    Address.is_default.is_(True)
                ).update({Address.is_default: False}, synchronize_session=False)

            address = Address(
                user_id=user_id,
                **data.model_dump(exclude={"is_default"}),
                is_default=make_default
            )
            db.add(address)
            db.commit()
            db.refresh(address)
            return address
        except Exception as e:
            logger.error(f"Error creating address for user {user_id}: {e}")
            db.rollback()
            raise
