# storefront/utils/order_utils.py

ORDER_STATUSES = ("pending", "processing", "delivered", "cancelled", "failed", "hold")


def get_status_variant(status: str) -> str:
    """Map an order status to the badge variant the apps render it with."""
    if status == "delivered":
        return "success"
    if status in ("pending", "processing"):
        return "warning"
    if status in ("cancelled", "failed"):
        return "danger"
    return "info"
