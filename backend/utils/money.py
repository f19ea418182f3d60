"""
Montants monétaires: conversion tolérante en Decimal et passage en unités mineures (centimes).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

# module backend.utils.money
def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convertit un montant (str|int|float|Decimal) en Decimal.
    - Les float passent par leur repr (19.99 -> Decimal("19.99"), pas l'artefact binaire).
    - Retourne None si la valeur est absente ou non numérique.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            return Decimal(repr(value))
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

def to_minor_units(amount: Decimal) -> int:
    """Montant en unités mineures (x100), arrondi au plus proche (demi vers le haut)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def money_to_float(amount: Optional[Decimal]) -> Optional[float]:
    if amount is None:
        return None
    return float(amount)
