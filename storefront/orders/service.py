from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
import math
import logging

from .models import Order, OrderItem
from ..addresses.models import Address
from ..cart.models import CartItem
from ..catalog.models import Product, StoreInventory
from ..catalog.service import CatalogService
from ..core.exceptions import (
    AddressNotFoundError, CartEmptyError, InsufficientStockError, PersistenceError
)
from ..services.cache import ReadThroughCache
from ..utils.order_utils import ORDER_STATUSES
from ..utils.update_inventory import decrement_stock, whole_quantity

logger = logging.getLogger(__name__)


def to_price(value: Any) -> float:
    """Numeric price, or 0.0 for anything missing or non-numeric."""
    if isinstance(value, bool):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if math.isfinite(price) else 0.0


def compute_total(lines: List[Dict[str, Any]]) -> float:
    return sum(line["quantity"] * line["price"] for line in lines)


def build_order_snapshot(lines: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Denormalized item list stored on the order row itself."""
    return [
        {
            "product_id": line["product_id"],
            "name": line["name"],
            "price": line["price"],
            "quantity": line["quantity"],
        }
        for line in lines
    ]


class OrderService:
    """
    Cart-to-order conversion and order reads.

    ``place_order`` runs its steps as separate commits: the store only offers
    row-level atomicity, so a failure after the order insert leaves the order
    (and any stock already decremented) in place. Nothing is compensated.
    """

    @staticmethod
    def _resolve_address(db: Session, user_id: str, address_id: str) -> Address:
        try:
            address = db.query(Address).filter(
                and_(Address.id == address_id, Address.user_id == user_id)
            ).first()
        except SQLAlchemyError as e:
            db.rollback()
            raise AddressNotFoundError(address_id, technical_details=str(e)) from e

        if not address:
            raise AddressNotFoundError(address_id)
        return address

    @staticmethod
    def _snapshot_cart(db: Session, user_id: str) -> List[Dict[str, Any]]:
        """Cart lines joined with visible product data; hidden or deleted products come back unpriced."""
        try:
            rows = db.query(CartItem, Product.name, Product.price).outerjoin(
                Product,
                and_(Product.id == CartItem.product_id, Product.user_visibility.is_(True))
            ).filter(CartItem.user_id == user_id).order_by(CartItem.id).all()
        except SQLAlchemyError as e:
            db.rollback()
            raise CartEmptyError(user_id, technical_details=str(e)) from e

        lines = []
        for item, name, price in rows:
            lines.append({
                "product_id": item.product_id,
                # Validated here so a bad quantity fails before anything is written
                "quantity": whole_quantity(item.product_id, item.quantity),
                "product": {"name": name, "price": price} if name is not None else None,
            })
        return lines

    @staticmethod
    def _backfill_products(db: Session, lines: List[Dict[str, Any]]) -> None:
        """Fill in product data the cart join could not see: inventory relation first, then products by id."""
        missing = [line["product_id"] for line in lines if line["product"] is None]
        if not missing:
            return

        found: Dict[str, Dict[str, Any]] = {}
        try:
            rows = db.query(StoreInventory.product_id, Product.name, Product.price)\
                     .join(Product, Product.id == StoreInventory.product_id)\
                     .filter(StoreInventory.product_id.in_(missing)).all()
            for product_id, name, price in rows:
                found.setdefault(product_id, {"name": name, "price": price})
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Inventory lookup for products {missing} failed: {e}")

        remaining = [pid for pid in missing if pid not in found]
        if remaining:
            try:
                rows = db.query(Product.id, Product.name, Product.price)\
                         .filter(Product.id.in_(remaining)).all()
                for product_id, name, price in rows:
                    found[product_id] = {"name": name, "price": price}
            except SQLAlchemyError as e:
                db.rollback()
                logger.warning(f"Product lookup for {remaining} failed: {e}")

        for line in lines:
            if line["product"] is None and line["product_id"] in found:
                line["product"] = found[line["product_id"]]

        unresolved = [line["product_id"] for line in lines if line["product"] is None]
        if unresolved:
            # Lossy: these lines are ordered at price 0 rather than failing checkout
            logger.warning(f"No product data for {unresolved}; pricing them at 0")

    @staticmethod
    def _price_lines(lines: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        priced = []
        for line in lines:
            product = line["product"] or {}
            priced.append({
                "product_id": line["product_id"],
                "quantity": line["quantity"],
                "name": product.get("name"),
                "price": to_price(product.get("price")),
            })
        return priced

    @staticmethod
    async def place_order(
        db: Session,
        user_id: str,
        address_id: str,
        payment_mode: str = "cod",
        cache: Optional[ReadThroughCache] = None
    ) -> str:
        """
        Turn the user's cart into a pending order and return the new order id.

        Raises AddressNotFoundError, CartEmptyError, InvalidQuantityError,
        InsufficientStockError or PersistenceError. None are retried.
        """
        address = OrderService._resolve_address(db, user_id, address_id)

        lines = OrderService._snapshot_cart(db, user_id)
        if not lines:
            raise CartEmptyError(user_id)

        OrderService._backfill_products(db, lines)
        lines = OrderService._price_lines(lines)
        total = compute_total(lines)

        try:
            order = Order(
                user_id=user_id,
                items=build_order_snapshot(lines),
                total_amount=total,
                address_line=address.address_line,
                phone=address.phone,
                pincode=address.pincode,
                delivery_instructions=address.delivery_instructions,
                latitude=address.latitude,
                longitude=address.longitude,
                payment_mode=payment_mode,
                status="pending"
            )
            db.add(order)
            db.commit()
            db.refresh(order)
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError("create order", technical_details=str(e)) from e

        order_id = order.id
        logger.info(f"Created order {order_id} for user {user_id}: {len(lines)} lines, total {total}")

        try:
            db.add_all([
                OrderItem(
                    order_id=order_id,
                    product_id=line["product_id"],
                    quantity=line["quantity"],
                    price_each=line["price"]
                )
                for line in lines
            ])
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(
                "create order items", technical_details=str(e), context={"order_id": order_id}
            ) from e

        # Sequential, stop at the first refusal; earlier decrements stay applied
        decremented = []
        try:
            for line in lines:
                try:
                    result = decrement_stock(db, line["product_id"], line["quantity"])
                except SQLAlchemyError as e:
                    raise PersistenceError(
                        "update stock",
                        technical_details=str(e),
                        context={"order_id": order_id, "product_id": line["product_id"]}
                    ) from e

                if not result or result.get("success") is False:
                    raise InsufficientStockError(
                        line["product_id"],
                        (result or {}).get("message"),
                        order_id=order_id
                    )

                decremented.append(line["product_id"])
        finally:
            # Entries for lines already decremented are stale even when a later line fails
            if cache is not None and decremented:
                CatalogService.invalidate_products(cache, decremented)

        # Best effort: the order is already complete
        try:
            db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Order {order_id} placed but clearing cart for user {user_id} failed: {e}")

        return order_id

    @staticmethod
    async def get_order_by_id(db: Session, order_id: str, user_id: str) -> Optional[Order]:
        """Get a specific order by ID (user can only see their own orders)"""
        return db.query(Order).filter(
            and_(Order.id == order_id, Order.user_id == user_id)
        ).first()

    @staticmethod
    async def get_user_orders(db: Session, user_id: str, skip: int = 0, limit: int = 100) -> List[Order]:
        """Get all orders for a specific user with pagination"""
        return db.query(Order).filter(Order.user_id == user_id)\
                 .order_by(Order.created_at.desc())\
                 .offset(skip).limit(limit).all()

    @staticmethod
    async def count_user_orders(db: Session, user_id: str) -> int:
        return db.query(Order).filter(Order.user_id == user_id).count()

    @staticmethod
    async def get_order_items(db: Session, order_id: str) -> List[OrderItem]:
        return db.query(OrderItem).filter(OrderItem.order_id == order_id).order_by(OrderItem.id).all()

    @staticmethod
    async def update_order_status(db: Session, order_id: str, status: str) -> Optional[Order]:
        """Update order status (admin function)"""
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status: {status}")

        order = db.query(Order).filter(Order.id == order_id).first()
        if order:
            order.status = status
            order.updated_at = datetime.now(timezone.utc)
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(
                    "update order status", technical_details=str(e), context={"order_id": order_id}
                ) from e
            db.refresh(order)
        return order
