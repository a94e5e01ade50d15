"""
Orchestrateur de règlement: enregistre le paiement puis retire les réservations réglées.

Cycle d'un règlement:
  Initiated -> Recorded -> MarkedPaid -> Retired
                                     +-> PartiallyRetired (dégradé, pas une erreur)
  AlreadySettled: rejeu d'une clé d'idempotence déjà réglée (seul le retrait est rejoué).

Chaque étape est une seule opération du document store, exécutée dans l'ordre,
sans rejeu automatique. Dès que le Payment existe, toute réponse (succès ou
erreur) porte son identifiant pour permettre une reprise (resume_settlement).
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from tourx.errors import InvalidInput, NotFound, SettlementError, SettlementFailure, StoreUnavailable
from tourx.payments import repository
from tourx.payments.amounts import parse_price
from tourx.store.records import PAID, PENDING
from tourx.utils.validators import parse_email, validate_identifier

logger = logging.getLogger(__name__)

STEP_RECORD = "record_payment"
STEP_MARK_PAID = "mark_paid"
STEP_RETIRE = "retire_bookings"


class SettlementState(str, Enum):
    INITIATED = "Initiated"
    RECORDED = "Recorded"
    MARKED_PAID = "MarkedPaid"
    RETIRED = "Retired"
    PARTIALLY_RETIRED = "PartiallyRetired"
    ALREADY_SETTLED = "AlreadySettled"


@dataclass
class SettlementOutcome:
    payment_id: str
    state: SettlementState
    requested_count: int
    retired_count: int
    inserted: bool

    def to_response(self) -> Dict[str, Any]:
        """Format de réponse HTTP (compatible avec le front TourX)."""
        return {
            "paymentId": self.payment_id,
            "status": self.state.value,
            "paymentResult": {"acknowledged": True, "insertedId": self.payment_id, "inserted": self.inserted},
            "deleteResult": {
                "acknowledged": True,
                "deletedCount": self.retired_count,
                "requestedCount": self.requested_count,
            },
        }


def normalize_booking_ids(booking_ids: Optional[Iterable[Any]]) -> List[str]:
    """UUID valides, doublons retirés en conservant l'ordre; liste vide -> InvalidInput."""
    if booking_ids is None or isinstance(booking_ids, (str, bytes)):
        raise InvalidInput("bookingItemIDs doit être une liste d'identifiants")
    ids: List[str] = []
    for raw in booking_ids:
        bid = validate_identifier(raw, "réservation")
        if bid not in ids:
            ids.append(bid)
    if not ids:
        raise InvalidInput("Aucune réservation à régler")
    return ids


def _mark_paid(payment_id: str, ids: List[str]) -> None:
    try:
        updated = repository.mark_payment_paid(payment_id, ids)
        if updated is None:
            # Plus Pending: déjà passé Paid par un règlement concurrent, ou disparu
            current = repository.get_payment(payment_id)
            if current is None or current.status != PAID:
                logger.error("payments.settle mark_paid matched no pending row payment_id=%s", payment_id)
                raise SettlementError(SettlementFailure.RECONCILIATION_FAILED, STEP_MARK_PAID, payment_id)
    except StoreUnavailable as e:
        raise SettlementError(SettlementFailure.RECONCILIATION_FAILED, STEP_MARK_PAID, payment_id) from e
    logger.info("payments.settle state=%s payment_id=%s", SettlementState.MARKED_PAID.value, payment_id)


def _retire(payment_id: str, ids: List[str], inserted: bool) -> SettlementOutcome:
    try:
        retired = repository.delete_bookings(ids)
    except StoreUnavailable as e:
        raise SettlementError(SettlementFailure.RECONCILIATION_FAILED, STEP_RETIRE, payment_id) from e
    if retired < len(ids):
        state = SettlementState.PARTIALLY_RETIRED
        logger.warning(
            "payments.settle partially retired payment_id=%s retired=%s requested=%s",
            payment_id, retired, len(ids),
        )
    else:
        state = SettlementState.RETIRED
        logger.info("payments.settle state=%s payment_id=%s retired=%s", state.value, payment_id, retired)
    return SettlementOutcome(payment_id, state, len(ids), retired, inserted)


def settle(
    payer_email: str,
    price: Any,
    booking_ids: Iterable[Any],
    idempotency_key: Optional[str] = None,
    transaction_id: Optional[str] = None,
) -> SettlementOutcome:
    payer = parse_email(payer_email)
    amount = parse_price(price)
    ids = normalize_booking_ids(booking_ids)
    key = (idempotency_key or "").strip() or None

    existing = None
    if key:
        try:
            existing = repository.find_payment_by_key(payer, key)
        except StoreUnavailable as e:
            raise SettlementError(SettlementFailure.PERSIST_FAILED, STEP_RECORD) from e
        if existing is not None and existing.status == PAID:
            logger.info("payments.settle state=%s payment_id=%s", SettlementState.ALREADY_SETTLED.value, existing.id)
            # Le retrait a pu échouer lors de la première tentative: on le rejoue
            outcome = _retire(existing.id, list(dict.fromkeys(existing.booking_ids)) or ids, False)
            outcome.state = SettlementState.ALREADY_SETTLED
            return outcome
        if existing is not None and existing.price != amount:
            raise InvalidInput("Montant différent de la réservation associée à cette clé")

    if existing is not None:
        payment_id, inserted = existing.id, False
    else:
        try:
            payment = repository.insert_payment(
                email=payer,
                price=amount,
                booking_ids=ids,
                idempotency_key=key,
                transaction_id=transaction_id,
            )
        except StoreUnavailable as e:
            raise SettlementError(SettlementFailure.PERSIST_FAILED, STEP_RECORD) from e
        payment_id, inserted = payment.id, True
    logger.info(
        "payments.settle state=%s payment_id=%s email=%s price=%s bookings=%s",
        SettlementState.RECORDED.value, payment_id, payer, amount, len(ids),
    )

    _mark_paid(payment_id, ids)
    return _retire(payment_id, ids, inserted)


def retire_bookings(booking_ids: Iterable[Any]) -> int:
    """Étape de retrait seule (reprise manuelle); idempotente: 0 pour des réservations déjà retirées."""
    return repository.delete_bookings(normalize_booking_ids(booking_ids))


def resume_settlement(payment_id: str) -> SettlementOutcome:
    """
    Reprend un règlement interrompu.
    - Pending: marque Paid puis retire les réservations.
    - Paid: ne rejoue que le retrait.
    """
    pid = validate_identifier(payment_id, "paiement")
    payment = repository.get_payment(pid)
    if payment is None:
        raise NotFound("Paiement introuvable")
    ids = list(dict.fromkeys(payment.booking_ids))
    if not ids:
        raise InvalidInput("Aucune réservation associée à ce paiement")
    logger.info("payments.resume payment_id=%s status=%s", pid, payment.status)
    if payment.status == PENDING:
        _mark_paid(pid, ids)
    return _retire(pid, ids, False)
