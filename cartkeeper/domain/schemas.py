# cartkeeper/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
from decimal import Decimal
from datetime import datetime


class ProductInfo(BaseModel):
    """Product as returned by the catalog service."""

    id: int
    name: str = ""
    price: Decimal = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    is_available: bool = True
    image: str | None = None


class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    # walidacja ilosci w serwisie, zeby zwracac InvalidQuantity
    quantity: int = Field(..., description="Quantity to add (>= 1)")


class QuantityIn(BaseModel):
    """Schema for overwriting a line quantity; 0 removes the line."""

    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    quantity: int = Field(..., description="New quantity (>= 0)")


class OwnerOut(BaseModel):
    type: Literal["account", "session"]
    account_id: int | None = None


class CartItemOut(BaseModel):
    """Cart line with read-time product display data."""

    product_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    name: str | None = None
    image: str | None = None
    current_price: Decimal | None = None
    is_available: bool | None = None


class CartOut(BaseModel):
    """Schema for a cart (response)."""

    cart_id: int
    owner: OwnerOut
    items: List[CartItemOut]
    total_price: Decimal
    item_count: int
    expires_at: datetime | None = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MergeOut(BaseModel):
    """Result of folding a guest cart into an account cart."""

    merged: bool
    message: str
    cart: CartOut | None = None
