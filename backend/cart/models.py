"""
Ligne de panier: instantané du produit au moment de l'ajout + quantité et total dérivé.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from backend.catalog.models import Product
from backend.utils.money import money_to_float, to_decimal

PROCESSING = "Processing"


class CartLine(BaseModel):
    """
    Invariants:
    - quantity >= 1
    - total_price == quantity x price (prix de l'instantané, jamais re-lu depuis le catalogue)
    Le total est recalculé à la construction: une valeur persistée n'est jamais reprise telle quelle.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id", min_length=1)
    title: str = ""
    image: Optional[str] = None
    price: Decimal = Field(ge=0)
    discount: Optional[Decimal] = None
    quantity: int = Field(1, ge=1)
    total_price: Decimal = Field(Decimal("0"), alias="totalPrice")
    shipment_status: str = Field(PROCESSING, alias="shipmentStatus")
    tracking_number: Optional[str] = Field(None, alias="trackingNumber")

    @field_validator("price", "discount", "total_price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    @model_validator(mode="after")
    def _derive_total(self) -> "CartLine":
        self.total_price = self.price * self.quantity
        return self

    @field_serializer("price", "discount", "total_price")
    def _serialize_money(self, v: Optional[Decimal]) -> Optional[float]:
        return money_to_float(v)

    @classmethod
    def from_product(cls, product: Product) -> "CartLine":
        return cls(
            _id=product.id,
            title=product.title,
            image=product.image_url,
            price=product.price,
            discount=product.discount,
            quantity=1,
        )

    def with_quantity(self, quantity: int) -> "CartLine":
        """Copie avec une nouvelle quantité et le total recalculé."""
        return self.model_copy(update={"quantity": quantity, "total_price": self.price * quantity})

    def to_storage(self) -> Dict[str, Any]:
        """Forme persistée {_id, title, image, price, quantity, totalPrice, shipmentStatus, ...}."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_payment_payload(self) -> Dict[str, Any]:
        """Ligne envoyée à l'endpoint de session de paiement."""
        return {
            "_id": self.id,
            "title": self.title,
            "image": self.image,
            "totalPrice": money_to_float(self.total_price),
            "quantity": self.quantity,
        }
