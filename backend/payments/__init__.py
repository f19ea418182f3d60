"""
Module 'payments' (feature-first): point d'entrée public.
Réunit la logique panier -> Stripe, le client Stripe et le service de création de session.
"""

from .cart import (
    PaymentCartLine,
    PaymentSessionError,
    parse_cart_products,
    unit_price_for,
    to_line_items,
    make_metadata,
)
from .stripe_client import require_stripe, create_session
from .service import checkout_urls, create_checkout_session

__all__ = [
    # cart
    "PaymentCartLine",
    "PaymentSessionError",
    "parse_cart_products",
    "unit_price_for",
    "to_line_items",
    "make_metadata",
    # stripe
    "require_stripe",
    "create_session",
    # services
    "checkout_urls",
    "create_checkout_session",
]
