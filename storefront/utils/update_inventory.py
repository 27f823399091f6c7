"""
Inventory update utilities.

Stock is only ever reduced through ``decrement_stock``: a single conditional
UPDATE that checks availability and subtracts in one statement, so concurrent
checkouts can never drive ``stock_value`` below zero.
"""

import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..catalog.models import Product
from ..core.exceptions import InvalidQuantityError

logger = logging.getLogger(__name__)


def whole_quantity(product_id: Any, quantity: Any) -> int:
    """Coerce a quantity to int, raising InvalidQuantityError unless it is a whole number."""
    if isinstance(quantity, bool):
        raise InvalidQuantityError(product_id, quantity)
    try:
        as_float = float(quantity)
    except (TypeError, ValueError):
        raise InvalidQuantityError(product_id, quantity)
    if not as_float.is_integer():
        raise InvalidQuantityError(product_id, quantity)
    return int(as_float)


def decrement_stock(db: Session, product_id: str, quantity: Any) -> Dict[str, Any]:
    """
    Atomically check and reduce stock for one product.

    Returns ``{"success": True}`` or ``{"success": False, "message": ...}``.
    Store errors propagate after the session is rolled back.
    """
    qty = whole_quantity(product_id, quantity)
    if qty <= 0:
        return {"success": False, "message": f"Quantity must be positive, got {qty}"}

    try:
        updated = (
            db.query(Product)
            .filter(Product.id == product_id, Product.stock_value >= qty)
            .update({Product.stock_value: Product.stock_value - qty}, synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    if updated:
        logger.info(f"Decremented stock for product {product_id} by {qty}")
        return {"success": True}

    product = db.query(Product.name, Product.stock_value).filter(Product.id == product_id).first()
    if product is None:
        logger.error(f"Product {product_id} not found")
        return {"success": False, "message": "Product not found"}

    logger.warning(
        f"Insufficient stock for product {product_id}. Current: {product.stock_value}, Requested: {qty}"
    )
    return {"success": False, "message": f"Insufficient stock for {product.name}"}
