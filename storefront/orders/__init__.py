from .controller import router
from .models import Order, OrderItem
from .service import OrderService

__all__ = ["router", "Order", "OrderItem", "OrderService"]
