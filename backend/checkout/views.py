# module backend.checkout.views

"""Page de checkout.
- GET /checkout: récapitulatif du panier (lignes, total) et éventuel message d'échec.
- POST /checkout: lance l'initiateur contre l'endpoint de session de paiement de cette même
  application (transport ASGI en mémoire), puis redirige vers la page de paiement hébergée.
  En cas d'échec, la page est ré-affichée avec un message; le panier reste intact.
"""
import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from backend import config
from backend.cart.store import CartStore
from backend.cart.views import get_cart_store
from backend.checkout import initiator
from backend.payments.views import request_origin
from backend.utils.templates import templates

web_router = APIRouter(tags=["Checkout"])

EMPTY_CART = "Votre panier est vide."

def _render(request: Request, store: CartStore, error: str = ""):
    resp = templates.TemplateResponse(
        request=request,
        name="checkout.html",
        context={
            "cart_lines": store.lines,
            "cart_total": store.total_price(),
            "error": error,
        },
    )
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return resp

@web_router.get("/checkout", response_class=HTMLResponse)
def checkout_page(request: Request, store: CartStore = Depends(get_cart_store)):
    return _render(request, store)

@web_router.post("/checkout", response_class=HTMLResponse)
async def start_checkout(request: Request, store: CartStore = Depends(get_cart_store)):
    """
    Démarre le paiement pour le panier de la session.
    - Panier vide: message, aucune requête.
    - Succès: 303 vers l'URL Stripe Checkout.
    - Échec: message utilisateur, pas de nouvelle tentative.
    """
    if not store.lines:
        return _render(request, store, error=EMPTY_CART)

    origin = request_origin(request)
    # Adresse et cookies de l'appelant: le rate limiting reste propre à chaque navigateur
    if request.client:
        transport = httpx.ASGITransport(app=request.app, client=(request.client.host, request.client.port))
    else:
        transport = httpx.ASGITransport(app=request.app)
    async with httpx.AsyncClient(transport=transport, base_url=origin, cookies=dict(request.cookies)) as client:
        outcome = await initiator.initiate_checkout(
            store.lines,
            client=client,
            publishable_key=config.STRIPE_PUBLIC_KEY,
            origin=origin,
        )
    if not outcome.ok:
        return _render(request, store, error=outcome.error or initiator.SESSION_ERROR)
    return RedirectResponse(url=outcome.redirect_url, status_code=HTTP_303_SEE_OTHER)
