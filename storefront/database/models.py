# Central models file so every table is registered on Base.metadata
# before create_all runs

from .core import Base

from ..catalog.models import Product, StoreInventory
from ..addresses.models import Address
from ..cart.models import CartItem
from ..orders.models import Order, OrderItem

# Export all models
__all__ = [
    "Base",
    "Product",
    "StoreInventory",
    "Address",
    "CartItem",
    "Order",
    "OrderItem",
]
