"""
Références d'images du catalogue.
Les documents exposent l'image sous plusieurs formes (URL directe, objet {asset: {url}},
objet {asset: {_ref}}, chemin de stockage). On la convertit une seule fois, à la frontière,
en union étiquetée ImageRef = DirectUrl | AssetReference.
"""
import logging
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

import backend.infra.supabase_client as supabase_client
from backend import config

logger = logging.getLogger(__name__)

_URL_PREFIXES = ("http://", "https://", "/")


class DirectUrl(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["url"] = "url"
    url: str


class AssetReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["asset"] = "asset"
    asset_id: str


ImageRef = Union[DirectUrl, AssetReference]

# module backend.catalog.images
def parse_image_ref(raw: Any) -> Optional[ImageRef]:
    """
    Interprète une valeur d'image brute.
    - str URL (http(s):// ou /...) -> DirectUrl; autre str non vide -> AssetReference (chemin de stockage)
    - {"asset": {"url": ...}} ou {"url": ...} -> DirectUrl
    - {"asset": {"_ref" | "_id": ...}} ou {"asset_id": ...} -> AssetReference
    - Retourne None si absent ou non reconnu.
    """
    if isinstance(raw, (DirectUrl, AssetReference)):
        return raw
    if isinstance(raw, str):
        value = raw.strip()
        if not value:
            return None
        if value.startswith(_URL_PREFIXES):
            return DirectUrl(url=value)
        return AssetReference(asset_id=value)
    if isinstance(raw, dict):
        asset = raw.get("asset")
        if isinstance(asset, dict):
            if asset.get("url"):
                return DirectUrl(url=str(asset["url"]))
            ref = asset.get("_ref") or asset.get("_id")
            if ref:
                return AssetReference(asset_id=str(ref))
        if raw.get("url"):
            return DirectUrl(url=str(raw["url"]))
        if raw.get("asset_id"):
            return AssetReference(asset_id=str(raw["asset_id"]))
    return None

def resolve_image_url(ref: Optional[ImageRef], placeholder: Optional[str] = None) -> str:
    """
    Retourne une URL récupérable pour une ImageRef.
    - DirectUrl: l'URL telle quelle.
    - AssetReference: URL publique Supabase Storage (bucket PRODUCT_IMAGES_BUCKET).
    - None ou échec de résolution: URL de remplacement (PLACEHOLDER_IMAGE_URL).
    """
    fallback = placeholder or config.PLACEHOLDER_IMAGE_URL
    if ref is None:
        return fallback
    if isinstance(ref, DirectUrl):
        return ref.url
    try:
        url = (
            supabase_client.get_supabase()
            .storage
            .from_(config.PRODUCT_IMAGES_BUCKET)
            .get_public_url(ref.asset_id)
        )
    except Exception:
        logger.exception("catalog.images.resolve_image_url failed asset_id=%s", ref.asset_id)
        return fallback
    # storage3 ajoute parfois un "?" final sans paramètre
    url = str(url or "").rstrip("?")
    return url or fallback

def image_url(raw: Any, placeholder: Optional[str] = None) -> str:
    """Raccourci: parse puis résout une image brute."""
    return resolve_image_url(parse_image_ref(raw), placeholder=placeholder)
