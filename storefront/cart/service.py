from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Dict, Any, Optional
from .models import CartItem
from ..catalog.models import Product
import logging

logger = logging.getLogger(__name__)

class CartService:
    """
    Single-item cart mutations keyed by (user, product).

    A cart line with quantity 0 is never stored: removing the last unit
    deletes the row. Mutators report failures in the returned dict instead of
    raising, so callers branch on ``result["success"]``.
    """

    @staticmethod
    def _find_line(db: Session, user_id: str, product_id: str) -> Optional[CartItem]:
        return db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).first()

    @staticmethod
    def _increment_line(db: Session, line_id: int) -> None:
        db.query(CartItem).filter(CartItem.id == line_id).update(
            {CartItem.quantity: CartItem.quantity + 1},
            synchronize_session=False
        )
        db.commit()

    @staticmethod
    async def add_to_cart(db: Session, product_id: str, user_id: str) -> Dict[str, Any]:
        """Add one unit of a product, creating the cart line on first add."""
        if not user_id:
            return {"success": False, "error": "Not logged in"}
        if not product_id:
            return {"success": False, "error": "Product is required"}

        try:
            existing = CartService._find_line(db, user_id, product_id)
            if existing:
                CartService._increment_line(db, existing.id)
                return {"success": True}

            try:
                db.add(CartItem(user_id=user_id, product_id=product_id, quantity=1))
                db.commit()
            except IntegrityError:
                # Another request inserted the line first; count this add against it
                db.rollback()
                existing = CartService._find_line(db, user_id, product_id)
                if not existing:
                    raise
                CartService._increment_line(db, existing.id)

            return {"success": True}
        except SQLAlchemyError as e:
            logger.error(f"Error adding product {product_id} to cart of user {user_id}: {e}")
            db.rollback()
            return {"success": False, "error": str(e)}

    @staticmethod
    async def remove_from_cart(db: Session, product_id: str, user_id: str) -> Dict[str, Any]:
        """Remove one unit of a product; the line is deleted when its last unit goes."""
        if not user_id:
            return {"success": False, "error": "Not logged in"}

        try:
            existing = CartService._find_line(db, user_id, product_id)
            if not existing:
                # Already gone
                return {"success": True}

            decremented = db.query(CartItem).filter(
                CartItem.id == existing.id,
                CartItem.quantity > 1
            ).update(
                {CartItem.quantity: CartItem.quantity - 1},
                synchronize_session=False
            )
            if not decremented:
                db.query(CartItem).filter(
                    CartItem.id == existing.id,
                    CartItem.quantity <= 1
                ).delete(synchronize_session=False)

            db.commit()
            return {"success": True}
        except SQLAlchemyError as e:
            logger.error(f"Error removing product {product_id} from cart of user {user_id}: {e}")
            db.rollback()
            return {"success": False, "error": str(e)}

    @staticmethod
    async def get_cart_count(db: Session, user_id: str) -> int:
        """Total units in the user's cart; 0 when there is no cart or the lookup fails."""
        if not user_id:
            return 0
        try:
            quantities = db.query(CartItem.quantity).filter(CartItem.user_id == user_id).all()
            return sum(q for (q,) in quantities)
        except SQLAlchemyError as e:
            logger.error(f"Error counting cart for user {user_id}: {e}")
            db.rollback()
            return 0

    @staticmethod
    async def get_user_cart(db: Session, user_id: str) -> Dict[str, Any]:
        """Cart lines joined with current product data, plus subtotals and total."""
        rows = db.query(CartItem, Product).outerjoin(
            Product, Product.id == CartItem.product_id
        ).filter(CartItem.user_id == user_id).order_by(CartItem.id).all()

        items = []
        total_value = 0.0
        for line, product in rows:
            price = product.price if product else 0.0
            subtotal = price * line.quantity
            total_value += subtotal
            items.append({
                "product_id": line.product_id,
                "quantity": line.quantity,
                "name": product.name if product else None,
                "price": price,
                "mrp": product.mrp if product else None,
                "image_url": product.image_url if product else None,
                "stock_value": product.stock_value if product else 0,
                "subtotal": subtotal
            })

        return {
            "items": items,
            "total_items": sum(item["quantity"] for item in items),
            "total_value": total_value
        }
