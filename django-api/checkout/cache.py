"""Cache keys for read-side responses."""

ORDER_STATUSES_KEY = "orders:statuses"


def customer_orders_key(customer_id: int) -> str:
    return f"orders:customer:{customer_id}"
