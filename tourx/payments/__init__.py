"""
Module 'payments' (feature-first): point d'entrée public.
Réunit montants, client Stripe, broker d'intents, repository et orchestrateur de règlement.
"""

from .amounts import parse_price, to_minor_units
from .stripe_client import require_stripe, create_payment_intent
from .broker import create_intent
from .repository import (
    insert_payment,
    mark_payment_paid,
    get_payment,
    find_payment_by_key,
    list_payments_by_email,
    delete_bookings,
)
from .settlement import (
    SettlementOutcome,
    SettlementState,
    settle,
    retire_bookings,
    resume_settlement,
)

__all__ = [
    # amounts
    "parse_price",
    "to_minor_units",
    # stripe
    "require_stripe",
    "create_payment_intent",
    # broker
    "create_intent",
    # repository
    "insert_payment",
    "mark_payment_paid",
    "get_payment",
    "find_payment_by_key",
    "list_payments_by_email",
    "delete_bookings",
    # settlement
    "SettlementOutcome",
    "SettlementState",
    "settle",
    "retire_bookings",
    "resume_settlement",
]
