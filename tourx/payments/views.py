import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from tourx.auth.service import ensure_self_access
from tourx.errors import Forbidden
from tourx.payments import broker
from tourx.payments import repository as payments_repo
from tourx.payments import settlement
from tourx.store.records import Email
from tourx.utils.rate_limit import optional_rate_limit
from tourx.utils.security import require_admin, require_user

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Payments API"])

class IntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price: Any
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")

class SettlementRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Email
    price: Any
    booking_ids: List[Any] = Field(alias="bookingItemIDs")
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")

# module tourx.payments.views
@router.post("/create-payment-intent", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_payment_intent(body: IntentRequest, identity: Dict[str, Any] = Depends(require_user)):
    """
    Crée un PaymentIntent Stripe pour le montant demandé et renvoie son client secret.
    - Sécurité: require_user + rate limit (10 req / 60s)
    - Avec idempotencyKey: une réservation Pending est persistée avant de renvoyer le secret
    - Erreurs: 400 montant invalide ou clé déjà réglée, 500 si Stripe ou le store échoue
    """
    result = broker.create_intent(body.price, identity["email"], idempotency_key=body.idempotency_key)
    return {"clientSecret": result["clientSecret"]}

@router.post("/payments")
def create_payment(body: SettlementRequest, identity: Dict[str, Any] = Depends(require_user)):
    """
    Règle les réservations payées: enregistre le Payment, le marque Paid, retire les réservations.
    - Le payeur doit être le porteur du jeton (403 sinon)
    - Erreurs: 500 {message, error, paymentId, step} si une étape d'écriture échoue
    """
    if body.email != identity["email"]:
        raise Forbidden("Accès interdit")
    outcome = settlement.settle(
        body.email,
        body.price,
        body.booking_ids,
        idempotency_key=body.idempotency_key,
        transaction_id=body.transaction_id,
    )
    return outcome.to_response()

@router.get("/payments/{email}")
def list_payments(email: str, identity: Dict[str, Any] = Depends(require_user)) -> List[Dict[str, Any]]:
    payer = ensure_self_access(identity, email)
    return [p.to_public() for p in payments_repo.list_payments_by_email(payer)]

@router.post("/payments/{payment_id}/reconcile", dependencies=[Depends(require_admin)])
def reconcile_payment(payment_id: str):
    """Reprise opérateur d'un règlement interrompu (ReconciliationFailed)."""
    outcome = settlement.resume_settlement(payment_id)
    logger.info("payments.reconcile payment_id=%s state=%s", outcome.payment_id, outcome.state.value)
    return outcome.to_response()
