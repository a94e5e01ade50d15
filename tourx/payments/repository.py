"""
Accès aux données pour la feature 'payments' (collections payments et bookings).
Aucune erreur n'est convertie en résultat vide: StoreUnavailable remonte à l'appelant.
"""
from decimal import Decimal
from typing import Iterable, List, Optional
import logging

from tourx.store import documents
from tourx.store.records import Collection, PAID, PENDING, PaymentRecord

logger = logging.getLogger(__name__)

# module tourx.payments.repository
def insert_payment(
    *,
    email: str,
    price: Decimal,
    booking_ids: List[str],
    idempotency_key: Optional[str] = None,
    transaction_id: Optional[str] = None,
    intent_id: Optional[str] = None,
) -> PaymentRecord:
    """Insère un Payment au statut Pending et retourne le document stocké (avec id)."""
    return documents.insert_one(
        Collection.PAYMENTS,
        {
            "email": email,
            "price": price,
            "booking_ids": list(booking_ids),
            "status": PENDING,
            "idempotency_key": idempotency_key,
            "transaction_id": transaction_id,
            "intent_id": intent_id,
        },
    )

def mark_payment_paid(payment_id: str, booking_ids: List[str]) -> Optional[PaymentRecord]:
    """
    Transition Pending -> Paid, conditionnelle au statut courant.
    - Retourne None si le Payment n'est pas (ou plus) Pending.
    """
    return documents.update_by_id(
        Collection.PAYMENTS,
        payment_id,
        {"status": PAID, "booking_ids": list(booking_ids)},
        expected={"status": PENDING},
    )

def get_payment(payment_id: str) -> Optional[PaymentRecord]:
    return documents.find_by_id(Collection.PAYMENTS, payment_id)

def find_payment_by_key(email: str, idempotency_key: str) -> Optional[PaymentRecord]:
    """Paiement déjà associé à (payeur, clé d'idempotence). Un Paid est préféré à un Pending."""
    rows = documents.find_many(
        Collection.PAYMENTS,
        {"email": email, "idempotency_key": idempotency_key},
    )
    for row in rows:
        if row.status == PAID:
            return row
    return rows[0] if rows else None

def list_payments_by_email(email: str) -> List[PaymentRecord]:
    """Paiements soumis du payeur; les réservations d'intent sont exclues."""
    rows = documents.find_many(Collection.PAYMENTS, {"email": email}, order_by="created_at", desc=True)
    return [p for p in rows if not p.is_reservation]

def delete_bookings(booking_ids: Iterable[str]) -> int:
    return documents.delete_by_ids(Collection.BOOKINGS, booking_ids)
