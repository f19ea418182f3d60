"""
Module 'cart' (feature-first): point d'entrée public.
Réunit le modèle de ligne, le format persisté versionné, les stockages et le store.
"""

from .models import CartLine, PROCESSING
from .persistence import CART_SCHEMA_VERSION, MalformedCartError, dump_cart, parse_cart
from .storage import CartStorage, MemoryStorage, SessionStorage
from .store import CartStore

__all__ = [
    "CartLine",
    "PROCESSING",
    "CART_SCHEMA_VERSION",
    "MalformedCartError",
    "dump_cart",
    "parse_cart",
    "CartStorage",
    "MemoryStorage",
    "SessionStorage",
    "CartStore",
]
