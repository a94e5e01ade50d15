"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
import stripe
from typing import Any, Dict, Optional

from tourx import config

# module tourx.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY.
    - Clé absente: on lève une erreur Stripe (AuthenticationError) sans appeler le réseau.
    """
    if not config.STRIPE_SECRET_KEY:
        raise stripe.AuthenticationError("STRIPE_SECRET_KEY manquant")
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe

def is_configured() -> bool:
    return bool(config.STRIPE_SECRET_KEY)

def create_payment_intent(
    *,
    amount: int,
    currency: str,
    metadata: Dict[str, Any],
    idempotency_key: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Crée un PaymentIntent Stripe (paiement par carte).
    - amount: montant en unités mineures (ex: 8000 pour 80.00)
    - idempotency_key: transmise à Stripe; une même clé renvoie le même intent
    Retour: dict intent incluant "id", "client_secret", "amount".
    """
    require_stripe()
    params: Dict[str, Any] = {
        "amount": amount,
        "currency": currency,
        "payment_method_types": ["card"],
        "metadata": metadata,
    }
    if idempotency_key:
        params["idempotency_key"] = idempotency_key
    intent = stripe.PaymentIntent.create(**params)
    # stripe retourne un objet; on le traite comme dict-compatible
    return dict(intent)
