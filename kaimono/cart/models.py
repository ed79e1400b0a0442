"""Cart models and their JSON wire format."""
import uuid
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed-amount"


class Currency(str, Enum):
    USD = "usd"
    EUR = "euro"
    BTC = "bitcoin"


class _WireModel(BaseModel):
    # Wire names are kebab-case; Python attributes are snake_case
    model_config = ConfigDict(populate_by_name=True)


class Price(_WireModel):
    currency: Currency = Currency.USD
    value: float = Field(default=0.0, ge=0)


class Discount(_WireModel):
    """Cart- or item-level discount.

    ``percentage_off`` applies to PERCENTAGE discounts, ``amount_off`` to
    FIXED_AMOUNT ones, in the currency of the line it applies to.
    """
    id: str
    type: DiscountType
    percentage_off: float = Field(default=0.0, ge=0, le=100, alias="percentage-off")
    amount_off: float = Field(default=0.0, ge=0, alias="amount-off")


class CartItem(_WireModel):
    product_id: str = Field(alias="product-id")
    quantity: int = Field(gt=0)
    discounts: List[Discount] = Field(default_factory=list)
    price: Price = Field(default_factory=Price)


class Cart(_WireModel):
    id: str = ""
    items: List[CartItem] = Field(default_factory=list, alias="cart-items")
    discounts: List[Discount] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON-ready dict using wire names."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def empty(cls) -> "Cart":
        """New cart with a server-assigned ID and no items."""
        return cls(id=str(uuid.uuid4()))


class UpdateCartRequest(BaseModel):
    """Body of PUT /cart and PUT /admin/cart/{id}."""
    data: Cart
