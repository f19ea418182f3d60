"""
Pages de fin de paiement: lecture du panier restant, à des fins d'affichage uniquement.
Ces informations ne font pas foi pour l'exécution de la commande.
"""
import secrets
from decimal import Decimal
from typing import Any, Dict, List

from backend.cart.models import CartLine

# module backend.outcome.service
def tracking_reference(lines: List[CartLine]) -> str:
    """Référence de suivi: celle de la première ligne si présente, sinon TRACK-<0..9999>."""
    if lines and lines[0].tracking_number:
        return lines[0].tracking_number
    return f"TRACK-{secrets.randbelow(10000)}"

def build_success_summary(lines: List[CartLine]) -> Dict[str, Any]:
    return {
        "tracking_number": tracking_reference(lines),
        "item_count": sum(line.quantity for line in lines),
        "total": sum((line.total_price for line in lines), Decimal("0")),
    }
