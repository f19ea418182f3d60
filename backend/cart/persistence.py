"""
Format persisté du panier (schéma versionné).

Version 1: {"version": 1, "lines": [CartLine, ...]} sérialisé en JSON.
Version 0 (héritée): tableau JSON nu de lignes, migré vers la version 1 au chargement.
"""
import json
from typing import Any, Iterable, List

from pydantic import ValidationError

from backend.cart.models import CartLine

CART_SCHEMA_VERSION = 1


class MalformedCartError(ValueError):
    """Contenu persisté illisible: JSON invalide, forme ou version inconnue, ligne invalide, doublon."""


# module backend.cart.persistence
def dump_cart(lines: Iterable[CartLine]) -> str:
    return json.dumps({
        "version": CART_SCHEMA_VERSION,
        "lines": [line.to_storage() for line in lines],
    })

def _migrate(payload: Any) -> List[Any]:
    """Ramène n'importe quelle version connue à la liste brute des lignes (v1)."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        version = payload.get("version")
        if version == CART_SCHEMA_VERSION and isinstance(payload.get("lines"), list):
            return payload["lines"]
        raise MalformedCartError(f"version de panier inconnue: {version!r}")
    raise MalformedCartError(f"forme de panier inattendue: {type(payload).__name__}")

def parse_cart(raw: str) -> List[CartLine]:
    """
    Désérialise un instantané persisté, en conservant l'ordre d'insertion.
    Soulève MalformedCartError pour tout contenu invalide.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedCartError("JSON de panier invalide") from e

    lines: List[CartLine] = []
    seen = set()
    for item in _migrate(payload):
        try:
            line = CartLine.model_validate(item)
        except ValidationError as e:
            raise MalformedCartError("ligne de panier invalide") from e
        if line.id in seen:
            raise MalformedCartError(f"identifiant dupliqué: {line.id}")
        seen.add(line.id)
        lines.append(line)
    return lines
