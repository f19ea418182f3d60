"""
Logique panier -> Stripe pure (pas d'appel Stripe, pas de DB).
"""
import json
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from backend.catalog.images import image_url
from backend.catalog.models import Product
from backend.utils.money import to_decimal, to_minor_units


class PaymentSessionError(Exception):
    """Échec de création de session: panier invalide ou refus du processeur de paiement."""


class PaymentCartLine(BaseModel):
    """Ligne reçue de l'initiateur: {_id?, title, image, totalPrice, quantity}."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    title: str = ""
    image: Any = None
    total_price: Decimal = Field(alias="totalPrice", ge=0)
    quantity: int = Field(ge=1)

    @field_validator("total_price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

# module backend.payments.cart
def parse_cart_products(items: Any) -> List[PaymentCartLine]:
    """
    Valide le payload cartProducts.
    - Soulève PaymentSessionError si absent, vide, ou si une ligne est invalide.
    """
    if not isinstance(items, list) or not items:
        raise PaymentSessionError("Panier vide")
    lines: List[PaymentCartLine] = []
    for index, item in enumerate(items):
        try:
            lines.append(PaymentCartLine.model_validate(item))
        except ValidationError as e:
            raise PaymentSessionError(f"Ligne de panier invalide (index {index})") from e
    return lines

def unit_price_for(line: PaymentCartLine, products: Mapping[str, Product], trust_client: bool) -> Decimal:
    """
    Prix unitaire retenu pour une ligne.
    - Produit connu du catalogue: prix du catalogue (le total client est ignoré).
    - Sinon, si trust_client: totalPrice / quantity (totalPrice est un total de ligne);
      un total qui ne se divise pas en centimes entiers est refusé (10.00 pour 3 unités).
    - Sinon: PaymentSessionError.
    """
    product = products.get(line.id) if line.id else None
    if product is not None:
        return product.price
    if trust_client:
        unit = line.total_price / line.quantity
        cents = unit * 100
        if cents != cents.to_integral_value():
            raise PaymentSessionError(
                f"Total non divisible par la quantité pour '{line.title or line.id or '?'}'"
            )
        return unit
    raise PaymentSessionError(f"Prix introuvable au catalogue pour '{line.title or line.id or '?'}'")

def to_line_items(
    lines: List[PaymentCartLine],
    products: Mapping[str, Product],
    *,
    currency: str,
    trust_client: bool = False,
) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir des lignes validées.
    - unit_amount en unités mineures (x100, arrondi demi vers le haut)
    - images: URL résolue de la ligne, à défaut celle du catalogue, à défaut le placeholder
    - Soulève PaymentSessionError si un montant n'est pas strictement positif:
      aucune session partielle n'est créée.
    """
    line_items: List[Dict[str, Any]] = []
    for line in lines:
        unit_amount = to_minor_units(unit_price_for(line, products, trust_client))
        if unit_amount <= 0:
            raise PaymentSessionError(f"Montant invalide pour '{line.title or line.id}'")
        product = products.get(line.id) if line.id else None
        raw_image = line.image if line.image else (product.image if product else None)
        name = line.title or (product.title if product else "") or "Article"
        line_items.append({
            "quantity": line.quantity,
            "price_data": {
                "currency": currency,
                "unit_amount": unit_amount,
                "product_data": {"name": name, "images": [image_url(raw_image)]},
            },
        })
    return line_items

def make_metadata(lines: List[PaymentCartLine]) -> Dict[str, str]:
    """
    Métadonnées Stripe associées à la session.
    - cart: JSON [{id, quantity}] tronqué à ~4500 chars pour respecter les limites Stripe.
    """
    cart_meta = [{"id": line.id, "quantity": line.quantity} for line in lines if line.id]
    return {"cart": json.dumps(cart_meta)[:4500]}
