"""Cart package: models and storage backends."""
from .models import Cart, CartItem, Currency, Discount, DiscountType, Price, UpdateCartRequest
from .storage import CartStore, InMemoryCartStore
from .redis_store import RedisCartStore

__all__ = [
    "Cart",
    "CartItem",
    "Currency",
    "Discount",
    "DiscountType",
    "Price",
    "UpdateCartRequest",
    "CartStore",
    "InMemoryCartStore",
    "RedisCartStore",
]
