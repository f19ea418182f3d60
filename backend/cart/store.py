"""
Panier: source de vérité pendant la session, recopiée dans le stockage à chaque mutation.
"""
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from backend import config
from backend.cart.models import CartLine
from backend.cart.persistence import MalformedCartError, dump_cart, parse_cart
from backend.cart.storage import CartStorage
from backend.catalog.models import Product

logger = logging.getLogger(__name__)


# module backend.cart.store
class CartStore:
    """
    Mapping ordonné {product_id: CartLine} (ordre d'insertion conservé pour l'affichage).
    - Au plus une ligne par identifiant produit.
    - Chaque mutation réécrit l'instantané complet sous la clé de stockage ("cart").
    - Décrément plancher: une ligne à quantité 1 reste à 1 (no-op), elle n'est pas supprimée.
    """

    def __init__(self, storage: CartStorage, key: Optional[str] = None):
        self._storage = storage
        self._key = key or config.CART_STORAGE_KEY
        self._lines: Dict[str, CartLine] = {}
        self.is_open = False

    @classmethod
    def load(cls, storage: CartStorage, key: Optional[str] = None) -> "CartStore":
        """
        Construit le panier depuis le stockage.
        - Contenu absent: panier vide.
        - Contenu invalide: panier vide, entrée purgée, avertissement loggé (jamais d'exception).
        """
        store = cls(storage, key=key)
        raw = storage.get_item(store._key)
        if raw is None:
            return store
        try:
            lines = parse_cart(raw)
        except MalformedCartError:
            logger.warning("cart.store.load purge malformed cart key=%s", store._key, exc_info=True)
            storage.remove_item(store._key)
            return store
        store._lines = {line.id: line for line in lines}
        return store

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def count(self) -> int:
        """Nombre de lignes (badge du panier)."""
        return len(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def get(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def add_to_cart(self, product: Product) -> CartLine:
        """
        Ajoute un produit: nouvelle ligne (quantité 1) ou quantité +1 si déjà présent.
        Ouvre la vue panier pour que l'utilisateur voie la mise à jour.
        """
        line = self._lines.get(product.id)
        if line is None:
            line = CartLine.from_product(product)
        else:
            line = line.with_quantity(line.quantity + 1)
        self._lines[product.id] = line
        self.is_open = True
        self._persist()
        return line

    def increment_quantity(self, product_id: str) -> Optional[CartLine]:
        """Quantité +1; None (aucun effet) si la ligne n'existe pas."""
        line = self._lines.get(product_id)
        if line is None:
            return None
        line = line.with_quantity(line.quantity + 1)
        self._lines[product_id] = line
        self._persist()
        return line

    def decrement_quantity(self, product_id: str) -> Optional[CartLine]:
        """Quantité -1 si > 1; ligne inchangée à 1; None si la ligne n'existe pas."""
        line = self._lines.get(product_id)
        if line is None:
            return None
        if line.quantity <= 1:
            return line
        line = line.with_quantity(line.quantity - 1)
        self._lines[product_id] = line
        self._persist()
        return line

    def remove_item(self, product_id: str) -> bool:
        if product_id not in self._lines:
            return False
        del self._lines[product_id]
        self._persist()
        return True

    def clear(self) -> None:
        self._lines.clear()
        self._persist()

    def total_price(self) -> Decimal:
        return sum((line.total_price for line in self._lines.values()), Decimal("0"))

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def _persist(self) -> None:
        self._storage.set_item(self._key, dump_cart(self._lines.values()))
