# Module: backend/catalog/models.py
"""Documents du catalogue (lecture seule): produits et catégories."""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.catalog.images import ImageRef, parse_image_ref, resolve_image_url
from backend.utils.money import money_to_float, to_decimal


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", min_length=1)
    title: str = ""
    price: Decimal = Field(ge=0)
    discount: Optional[Decimal] = None
    price_without_discount: Optional[Decimal] = Field(None, alias="priceWithoutDiscount")
    image: Optional[ImageRef] = None
    inventory: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    badge: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    @field_validator("price", "discount", "price_without_discount", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    @field_validator("image", mode="before")
    @classmethod
    def _image(cls, v: Any) -> Optional[ImageRef]:
        return parse_image_ref(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v: Any) -> List[str]:
        return [str(t) for t in (v or [])]

    @property
    def image_url(self) -> str:
        return resolve_image_url(self.image)

    @property
    def in_stock(self) -> bool:
        """Stock inconnu (None) = disponible."""
        return self.inventory is None or self.inventory > 0

    def to_document(self) -> Dict[str, Any]:
        """Forme publique {_id, title, price, discount?, image, ...} avec l'image déjà résolue."""
        return {
            "_id": self.id,
            "title": self.title,
            "price": money_to_float(self.price),
            "discount": money_to_float(self.discount),
            "priceWithoutDiscount": money_to_float(self.price_without_discount),
            "image": self.image_url,
            "inventory": self.inventory,
            "tags": list(self.tags),
            "badge": self.badge,
            "description": self.description,
            "category": self.category,
        }


class Category(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", min_length=1)
    title: str = ""
    image: Optional[ImageRef] = None
    products: Optional[int] = None

    @field_validator("image", mode="before")
    @classmethod
    def _image(cls, v: Any) -> Optional[ImageRef]:
        return parse_image_ref(v)

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "image": resolve_image_url(self.image),
            "products": self.products,
        }
