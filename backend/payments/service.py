"""
Cas d'usage 'payments': orchestre validation du panier, tarification catalogue et Stripe.
"""
from typing import Any, Dict
import logging

from backend import config
from backend.catalog import repository as catalog_repository
from . import cart as cart_logic
from . import stripe_client
from .cart import PaymentSessionError

logger = logging.getLogger(__name__)

# module backend.payments.service
def checkout_urls(origin: str) -> Dict[str, str]:
    """URLs de retour dérivées de l'origine de la requête + chemins relatifs fixes."""
    base = (origin or "").rstrip("/")
    return {
        "success_url": f"{base}{config.CHECKOUT_SUCCESS_PATH}",
        "cancel_url": f"{base}{config.CHECKOUT_CANCEL_PATH}",
    }

def create_checkout_session(cart_products: Any, *, origin: str) -> Dict[str, Any]:
    """
    Crée la session Stripe Checkout pour un panier soumis par le client.
    1) Valide les lignes (panier vide refusé)
    2) Recharge les produits du catalogue et recalcule les prix côté serveur
    3) Construit line_items + metadata
    4) Crée la session (mode "payment") et renvoie {id, url}
    Soulève PaymentSessionError en cas d'échec; aucune session partielle.
    """
    lines = cart_logic.parse_cart_products(cart_products)
    products = catalog_repository.get_products_map(line.id for line in lines if line.id)
    line_items = cart_logic.to_line_items(
        lines,
        products,
        currency=config.CHECKOUT_CURRENCY,
        trust_client=config.CHECKOUT_TRUST_CLIENT_PRICES,
    )
    metadata = cart_logic.make_metadata(lines)
    try:
        session = stripe_client.create_session(
            line_items=line_items,
            mode="payment",
            metadata=metadata,
            **checkout_urls(origin),
        )
    except Exception as e:
        logger.exception("payments.service.create_checkout_session stripe failed items=%s", len(line_items))
        raise PaymentSessionError(str(e)) from e

    if not session.get("id"):
        raise PaymentSessionError("Session Stripe invalide")
    logger.info("payments.service session created id=%s items=%s", session["id"], len(line_items))
    return session
