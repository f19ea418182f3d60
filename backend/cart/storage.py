"""
Emplacements clé/valeur où le panier est persisté.
- MemoryStorage: dict en mémoire (tests, scripts).
- SessionStorage: session Starlette, c.-à-d. le cookie signé conservé par le navigateur.
Les valeurs sont toujours des chaînes (JSON sérialisé).
"""
from abc import ABC, abstractmethod
from typing import Dict, MutableMapping, Optional

# module backend.cart.storage
class CartStorage(ABC):
    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage(CartStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class SessionStorage(CartStorage):
    """Adaptateur sur request.session (SessionMiddleware)."""

    def __init__(self, session: MutableMapping):
        self._session = session

    def get_item(self, key: str) -> Optional[str]:
        value = self._session.get(key)
        if value is None or isinstance(value, str):
            return value
        # valeur non textuelle: rendue invalide pour être purgée au chargement
        return ""

    def set_item(self, key: str, value: str) -> None:
        self._session[key] = value

    def remove_item(self, key: str) -> None:
        self._session.pop(key, None)
