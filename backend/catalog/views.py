"""Endpoints du catalogue (lecture seule).
- API: liste des produits (filtre par tag), détail d'un produit, liste des catégories.
- Pages: liste des produits avec le panneau panier (ouvert après un ajout), fiche produit.
Une requête catalogue en échec dégrade en liste vide (voir catalog.repository).
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from backend.cart.store import CartStore
from backend.cart.views import get_cart_store
from backend.catalog import repository as catalog_repository
from backend.utils.templates import templates

router = APIRouter(prefix="/api/v1", tags=["Catalog API"])
web_router = APIRouter(tags=["Catalog Pages"])

@router.get("/products")
def list_products(tag: Optional[str] = None) -> List[Dict[str, Any]]:
    """Produits normalisés {_id, title, price, discount?, image, ...}; ?tag=featured pour la sélection."""
    return [p.to_document() for p in catalog_repository.list_products(tag=tag)]

@router.get("/products/{product_id}")
def get_product(product_id: str) -> Dict[str, Any]:
    product = catalog_repository.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return product.to_document()

@router.get("/categories")
def list_categories() -> List[Dict[str, Any]]:
    return [c.to_document() for c in catalog_repository.list_categories()]

@web_router.get("/", response_class=HTMLResponse, include_in_schema=False)
@web_router.get("/products", response_class=HTMLResponse)
def products_page(request: Request, cart: Optional[str] = None, store: CartStore = Depends(get_cart_store)):
    """Liste des produits + panneau panier (badge = nombre de lignes)."""
    if cart == "open":
        store.open()
    products = [p.to_document() for p in catalog_repository.list_products()]
    return templates.TemplateResponse(
        request=request,
        name="products.html",
        context={
            "products": products,
            "cart_lines": store.lines,
            "cart_total": store.total_price(),
            "cart_count": store.count,
            "cart_open": store.is_open,
        },
    )

@web_router.get("/product/{product_id}", response_class=HTMLResponse)
def product_page(request: Request, product_id: str):
    """Fiche produit: description, prix barré, remise, stock; ajout désactivé hors stock."""
    product = catalog_repository.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return templates.TemplateResponse(
        request=request,
        name="product.html",
        context={"product": product.to_document(), "in_stock": product.in_stock},
    )
