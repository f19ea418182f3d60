"""
Lecture du catalogue (tables 'products' et 'categories' du backend de contenu Supabase).
- Lecture seule: aucune écriture.
- En cas d'échec de requête: log + résultat vide (la page dégrade en liste vide).
"""
from typing import Any, Dict, Iterable, List, Optional
import logging

from pydantic import ValidationError

import backend.infra.supabase_client as supabase_client
from backend import config
from backend.catalog.models import Category, Product

logger = logging.getLogger(__name__)

# module backend.catalog.repository
def _normalize_product_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Ligne SQL -> document {_id, title, price, discount?, image, ...}."""
    return {
        "_id": str(row.get("id") or row.get("_id") or ""),
        "title": row.get("title") or "",
        "price": row.get("price"),
        "discount": row.get("discount"),
        "priceWithoutDiscount": row.get("price_without_discount", row.get("priceWithoutDiscount")),
        "image": row.get("image"),
        "inventory": row.get("inventory"),
        "tags": row.get("tags") or [],
        "badge": row.get("badge"),
        "description": row.get("description"),
        "category": row.get("category_id") or row.get("category"),
    }

def _normalize_category_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "_id": str(row.get("id") or row.get("_id") or ""),
        "title": row.get("title") or "",
        "image": row.get("image"),
        "products": row.get("products"),
    }

def _to_products(rows: Optional[List[Dict[str, Any]]]) -> List[Product]:
    products: List[Product] = []
    for row in rows or []:
        try:
            products.append(Product.model_validate(_normalize_product_row(row)))
        except ValidationError:
            logger.warning("catalog.repository skip invalid product row id=%s", row.get("id"))
    return products

def list_products(tag: Optional[str] = None) -> List[Product]:
    """
    Liste les produits, optionnellement filtrés par tag (ex: "featured").
    - Retourne [] en cas d'erreur.
    """
    try:
        query = supabase_client.get_supabase().table(config.PRODUCTS_TABLE).select("*")
        if tag:
            query = query.contains("tags", [tag])
        res = query.order("title").execute()
    except Exception:
        logger.exception("catalog.repository.list_products failed tag=%s", tag)
        return []
    return _to_products(res.data)

def get_product(product_id: str) -> Optional[Product]:
    """Récupère un produit par son identifiant, None si introuvable ou en cas d'erreur."""
    if not product_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table(config.PRODUCTS_TABLE)
            .select("*")
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
    except Exception:
        logger.exception("catalog.repository.get_product failed id=%s", product_id)
        return None
    products = _to_products(res.data)
    return products[0] if products else None

def get_products_map(ids: Iterable[str]) -> Dict[str, Product]:
    """
    Retourne un dict {id: Product} pour les IDs demandés.
    - Les IDs inconnus sont simplement absents du résultat.
    """
    id_list = [str(i) for i in ids if i]
    if not id_list:
        return {}
    try:
        res = (
            supabase_client.get_supabase()
            .table(config.PRODUCTS_TABLE)
            .select("*")
            .in_("id", id_list)
            .execute()
        )
    except Exception:
        logger.exception("catalog.repository.get_products_map failed ids=%s", id_list)
        return {}
    return {p.id: p for p in _to_products(res.data)}

def list_categories() -> List[Category]:
    try:
        res = supabase_client.get_supabase().table(config.CATEGORIES_TABLE).select("*").order("title").execute()
    except Exception:
        logger.exception("catalog.repository.list_categories failed")
        return []
    categories: List[Category] = []
    for row in res.data or []:
        try:
            categories.append(Category.model_validate(_normalize_category_row(row)))
        except ValidationError:
            logger.warning("catalog.repository skip invalid category row id=%s", row.get("id"))
    return categories
