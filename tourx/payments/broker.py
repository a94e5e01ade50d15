"""
Broker d'intents de paiement: montant -> PaymentIntent Stripe -> client secret.

- Un seul appel Stripe, jamais rejoué: toute erreur Stripe devient ProcessorError (500).
- Avec une clé d'idempotence, une réservation Payment « Pending » est persistée
  avant que le secret ne soit renvoyé: un débit ne peut pas exister sans trace locale.
"""
import hashlib
import logging
from typing import Any, Dict, Optional

import stripe

from tourx import config
from tourx.errors import InvalidInput, ProcessorError
from tourx.payments import repository
from tourx.payments import stripe_client
from tourx.payments.amounts import parse_price
from tourx.store.records import PAID
from tourx.utils.validators import normalize_email

logger = logging.getLogger(__name__)

def stripe_idempotency_key(payer: str, key: str) -> str:
    """Clé Stripe préfixée par l'empreinte du payeur (les clés Stripe sont globales au compte)."""
    digest = hashlib.sha256(payer.encode("utf-8")).hexdigest()[:16]
    return f"{digest}:{key}"

def create_intent(
    amount: Any,
    email: str,
    currency: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> Dict[str, Any]:
    price = parse_price(amount)
    minor = int(price * 100)
    payer = normalize_email(email)
    key = (idempotency_key or "").strip() or None

    existing = repository.find_payment_by_key(payer, key) if key else None
    if existing is not None:
        if existing.status == PAID:
            raise InvalidInput("Paiement déjà réglé pour cette clé d'idempotence")
        if existing.price != price:
            raise InvalidInput("Clé d'idempotence déjà utilisée pour un autre montant")

    try:
        intent = stripe_client.create_payment_intent(
            amount=minor,
            currency=currency or config.STRIPE_CURRENCY,
            metadata={"email": payer, "idempotency_key": key or ""},
            idempotency_key=stripe_idempotency_key(payer, key) if key else None,
        )
    except stripe.StripeError as e:
        logger.exception("payments.create_intent stripe error email=%s amount=%s", payer, minor)
        raise ProcessorError(f"Échec de création de l'intent de paiement: {getattr(e, 'user_message', None) or e}")

    intent_id = intent.get("id")
    if key and existing is None:
        reservation = repository.insert_payment(
            email=payer,
            price=price,
            booking_ids=[],
            idempotency_key=key,
            intent_id=intent_id,
        )
        logger.info("payments.create_intent reserved payment_id=%s intent_id=%s", reservation.id, intent_id)

    logger.info("payments.create_intent ok email=%s amount=%s intent_id=%s", payer, minor, intent_id)
    return {"clientSecret": intent.get("client_secret"), "intentId": intent_id, "amount": minor}
