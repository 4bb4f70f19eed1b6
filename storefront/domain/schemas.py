# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import datetime


class Buyer(BaseModel):
    """Identity resolved from the bearer token."""

    id: str
    email: Optional[str] = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class ProductOut(BaseModel):
    id: str
    supermarket_id: str
    name: str
    price: Decimal
    stock: int
    image_url: str | None = None
    description: str | None = None
    category: str | None = None

    model_config = ConfigDict(from_attributes=True)


SortOption = Literal["priceAsc", "priceDesc", "stock"]


class ProductSnapshot(BaseModel):
    """Product copy held inside the cart, may be stale by checkout time."""

    id: str
    name: str
    price: Decimal
    stock: int
    image_url: str | None = None
    category: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CartItem(BaseModel):
    product: ProductSnapshot
    quantity: int = Field(..., gt=0)


class CartOut(BaseModel):
    supermarket_id: str
    items: List[CartItem]
    total: Decimal


class CartItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, description="Quantity to add (> 0)")


class CartQuantityIn(BaseModel):
    quantity: int = Field(..., gt=0)


class CartLine(BaseModel):
    """One checkout line: what the buyer wants, never what it costs."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class CheckoutIn(BaseModel):
    # when omitted the stored cart is checked out
    items: Optional[List[CartLine]] = None


class CheckoutOut(BaseModel):
    order_id: str
    total_amount: Decimal
    status: str
    redirect_url: str


class OrderItemOut(BaseModel):
    product_id: str
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: str
    supermarket_id: str
    user_id: str | None = None
    total_amount: Decimal
    status: str
    created_at: datetime
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class ClearOrdersOut(BaseModel):
    deleted: int


class PayIn(BaseModel):
    """Body of /api/pay. Fields are checked by hand so a gap answers 400."""

    email: Optional[str] = None
    amount: Optional[Decimal] = None
    reference: Optional[str] = None


class ProductRequestIn(BaseModel):
    request: str = Field(..., min_length=1, max_length=500)


class ProductRequestOut(BaseModel):
    id: int
    supermarket_id: str
    user_id: str | None = None
    request: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
