from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from backend import config
from backend.cart.store import CartStore
from backend.cart.views import get_cart_store
from backend.outcome.service import build_success_summary
from backend.utils.templates import templates

web_router = APIRouter(tags=["Checkout Outcome"])

@web_router.get("/success", response_class=HTMLResponse)
def success_page(request: Request, store: CartStore = Depends(get_cart_store)):
    """Paiement réussi: récapitulatif indicatif. Vide le panier si CLEAR_CART_ON_SUCCESS est activé."""
    summary = build_success_summary(store.lines)
    if config.CLEAR_CART_ON_SUCCESS and store.lines:
        store.clear()
    return templates.TemplateResponse(request=request, name="success.html", context={"summary": summary})

@web_router.get("/cancel", response_class=HTMLResponse)
def cancel_page(request: Request, store: CartStore = Depends(get_cart_store)):
    """Paiement annulé: le panier est conservé pour une nouvelle tentative."""
    return templates.TemplateResponse(
        request=request,
        name="cancel.html",
        context={"cart_count": store.count, "cart_total": store.total_price()},
    )
