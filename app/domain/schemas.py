# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal

from app.domain.enums import ColorEnum, SizeEnum


class ProductOut(BaseModel):
    """Produkt z product-service (cena + dostepne warianty)."""

    id: int
    name: str | None = None
    price: Decimal = Field(..., ge=0)
    colors: List[ColorEnum] = []
    sizes: List[SizeEnum] = []


class BasketItemIn(BaseModel):
    """Schema dla dodawania / zmiany ilosci produktu w koszyku."""

    color: ColorEnum
    size: SizeEnum
    quantity: int = Field(..., description="Zmiana ilosci (ujemna zmniejsza lub usuwa pozycje)")


class BasketItemOut(BaseModel):
    """Pozycja koszyka zwracana po add / merge."""

    id: int
    basket_id: int
    product_id: int
    color: ColorEnum
    size: SizeEnum
    quantity: int
    price: Decimal
    removed: bool = False

    model_config = ConfigDict(from_attributes=True)


class BasketLineOut(BaseModel):
    """Pozycja w widoku koszyka, z produktem zawezonym do wybranego wariantu."""

    id: int
    color: ColorEnum
    size: SizeEnum
    quantity: int
    price: Decimal
    product: ProductOut | None = None


class BasketOut(BaseModel):
    """Schema dla koszyka (response)."""

    id: int
    user_id: int
    total_items: int
    total_price: Decimal
    items: List[BasketLineOut]


class MessageOut(BaseModel):
    message: str
