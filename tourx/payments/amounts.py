"""
Montants: conversion prix décimal -> unités mineures (centimes) pour Stripe.
Arithmétique Decimal exacte: aucun flottant n'intervient dans le calcul.
"""
from decimal import Decimal, InvalidOperation
from typing import Any

from tourx.errors import InvalidInput

def parse_price(value: Any) -> Decimal:
    """
    Prix strictement positif, au plus 2 décimales.
    - Les nombres JSON sont lus via leur représentation textuelle (19.99 -> Decimal("19.99")).
    - Booléens, NaN, infinis, négatifs, zéro ou 3+ décimales -> InvalidInput.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInput("Montant invalide")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"Montant invalide: {value}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidInput(f"Montant invalide: {value}")
    if amount != amount.quantize(Decimal("0.01")):
        raise InvalidInput(f"Montant avec plus de 2 décimales: {value}")
    return amount.quantize(Decimal("0.01"))

def to_minor_units(amount: Any) -> int:
    return int(parse_price(amount) * 100)
