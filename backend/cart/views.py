# module backend.cart.views

"""Endpoints du panier.
- API JSON (/api/v1/cart): lecture, ajout, incrément, décrément, suppression, vidage.
- Formulaires HTML (/cart/add, /cart/increment, /cart/decrement, /cart/remove): depuis la page
  produits puis retour sur la liste, panneau panier ouvert.
Le panier est chargé depuis la session (cookie signé) à chaque requête et réécrit à chaque mutation.
"""
from typing import Any, Dict
import secrets

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from backend import config
from backend.cart.storage import SessionStorage
from backend.cart.store import CartStore
from backend.catalog import repository as catalog_repository
from backend.utils.money import money_to_float

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])
web_router = APIRouter(tags=["Cart"])

def get_cart_store(request: Request) -> CartStore:
    """
    Dépendance: panier de la session courante.
    Attribue aussi au navigateur un identifiant de visiteur stable (clé de rate limiting).
    """
    request.session.setdefault(config.VISITOR_SESSION_KEY, secrets.token_urlsafe(12))
    return CartStore.load(SessionStorage(request.session))

def cart_payload(store: CartStore) -> Dict[str, Any]:
    return {
        "items": [line.to_storage() for line in store.lines],
        "total": money_to_float(store.total_price()),
        "count": store.count,
        "item_count": store.item_count,
    }

def _require_line(store: CartStore, product_id: str) -> None:
    if product_id not in store:
        raise HTTPException(status_code=404, detail="Article absent du panier")

@router.get("")
def read_cart(store: CartStore = Depends(get_cart_store)):
    return cart_payload(store)

@router.post("/items")
async def add_item(request: Request, store: CartStore = Depends(get_cart_store)):
    """
    Ajoute un produit au panier.
    - Body: { "product_id": "<id>" }
    - Le produit est relu dans le catalogue: le client n'envoie jamais de prix.
    - Erreurs: 400 si product_id manquant, 404 si produit introuvable, 409 si hors stock.
    """
    try:
        body = await request.json()
    except Exception:
        body = None
    product_id = ""
    if isinstance(body, dict):
        product_id = str(body.get("product_id") or "").strip()
    if not product_id:
        raise HTTPException(status_code=400, detail="product_id manquant")
    product = catalog_repository.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    if not product.in_stock:
        raise HTTPException(status_code=409, detail="Produit en rupture de stock")
    store.add_to_cart(product)
    return cart_payload(store)

@router.post("/items/{product_id}/increment")
def increment_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    _require_line(store, product_id)
    store.increment_quantity(product_id)
    return cart_payload(store)

@router.post("/items/{product_id}/decrement")
def decrement_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    """Quantité -1; une ligne à 1 reste à 1 (utiliser DELETE pour la retirer)."""
    _require_line(store, product_id)
    store.decrement_quantity(product_id)
    return cart_payload(store)

@router.delete("/items/{product_id}")
def remove_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    """Retire la ligne; sans effet si elle n'existe pas."""
    store.remove_item(product_id)
    return cart_payload(store)

@router.delete("")
def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.clear()
    return cart_payload(store)

CART_PANEL_URL = "/products?cart=open"

def _back_to_list(store: CartStore) -> RedirectResponse:
    url = CART_PANEL_URL if store.is_open else "/products"
    return RedirectResponse(url=url, status_code=HTTP_303_SEE_OTHER)

@web_router.post("/cart/add", include_in_schema=False)
def add_item_form(product_id: str = Form(...), store: CartStore = Depends(get_cart_store)):
    """Ajout depuis la page produits; un produit inconnu ou hors stock renvoie simplement sur la liste."""
    product = catalog_repository.get_product(product_id.strip())
    if product and product.in_stock:
        store.add_to_cart(product)
    return _back_to_list(store)

# Boutons +/−/corbeille du panneau panier: retour sur le panneau ouvert
@web_router.post("/cart/increment", include_in_schema=False)
def increment_item_form(product_id: str = Form(...), store: CartStore = Depends(get_cart_store)):
    store.increment_quantity(product_id.strip())
    store.open()
    return _back_to_list(store)

@web_router.post("/cart/decrement", include_in_schema=False)
def decrement_item_form(product_id: str = Form(...), store: CartStore = Depends(get_cart_store)):
    store.decrement_quantity(product_id.strip())
    store.open()
    return _back_to_list(store)

@web_router.post("/cart/remove", include_in_schema=False)
def remove_item_form(product_id: str = Form(...), store: CartStore = Depends(get_cart_store)):
    store.remove_item(product_id.strip())
    store.open()
    return _back_to_list(store)
