"""
Initiateur de checkout: transmet l'instantané du panier à l'endpoint de session de paiement
puis suit la redirection vers la page de paiement hébergée.
- Un seul aller-retour réseau, sans nouvelle tentative.
- Aucun calcul de prix ici: les totaux viennent du panier.
- Le panier n'est jamais modifié, en cas de succès comme d'échec.
"""
from typing import Iterable, Optional
import logging

import httpx
from pydantic import BaseModel

from backend.cart.models import CartLine

logger = logging.getLogger(__name__)

PAYMENT_SESSION_ENDPOINT = "/api/v1/payments/session"

PROCESSOR_UNAVAILABLE = "Le module de paiement n'a pas pu être chargé."
SESSION_ERROR = "Erreur lors de la création de la session de paiement."
REDIRECT_ERROR = "Un problème est survenu lors de la redirection vers le paiement."
NETWORK_ERROR = "Une erreur est survenue, veuillez réessayer."


class CheckoutOutcome(BaseModel):
    ok: bool
    session_id: Optional[str] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "CheckoutOutcome":
        return cls(ok=False, error=message)

# module backend.checkout.initiator
async def initiate_checkout(
    lines: Iterable[CartLine],
    *,
    client: httpx.AsyncClient,
    publishable_key: str,
    endpoint: str = PAYMENT_SESSION_ENDPOINT,
    origin: Optional[str] = None,
) -> CheckoutOutcome:
    """
    Étapes:
    1) Client de paiement indisponible (clé publique absente) -> échec immédiat, aucune requête
    2) POST {"cartProducts": [...]} vers l'endpoint
    3) Erreur réseau, réponse non JSON, champ "error" ou "id" absent -> échec
    4) Succès: identifiant de session + URL de redirection du processeur
    """
    if not publishable_key:
        logger.error("checkout.initiator processor client unavailable (no publishable key)")
        return CheckoutOutcome.failure(PROCESSOR_UNAVAILABLE)

    payload = {"cartProducts": [line.to_payment_payload() for line in lines]}
    headers = {"Origin": origin} if origin else {}
    try:
        response = await client.post(endpoint, json=payload, headers=headers)
        session = response.json()
    except httpx.HTTPError:
        logger.exception("checkout.initiator request failed endpoint=%s", endpoint)
        return CheckoutOutcome.failure(NETWORK_ERROR)
    except ValueError:
        logger.error("checkout.initiator non-JSON response status=%s", response.status_code)
        return CheckoutOutcome.failure(SESSION_ERROR)

    if not isinstance(session, dict) or session.get("error") or not session.get("id"):
        error = session.get("error") if isinstance(session, dict) else None
        logger.error("checkout.initiator session error status=%s error=%s", response.status_code, error)
        return CheckoutOutcome.failure(SESSION_ERROR)

    redirect_url = session.get("url")
    if not redirect_url:
        logger.error("checkout.initiator missing redirect url session_id=%s", session["id"])
        return CheckoutOutcome.failure(REDIRECT_ERROR)

    return CheckoutOutcome(ok=True, session_id=session["id"], redirect_url=redirect_url)
