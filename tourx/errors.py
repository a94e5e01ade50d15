"""
Taxonomie d'erreurs du backend TourX.

Toutes les erreurs héritent de HTTPException: elles peuvent être levées depuis
les services comme depuis les dépendances FastAPI, et sont rendues en JSON
{"detail": ...} par le handler unique de tourx.app_setup.exceptions.
"""
from enum import Enum
from typing import Optional
from fastapi import HTTPException


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Non authentifié"):
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Accès interdit"):
        super().__init__(status_code=403, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Ressource introuvable"):
        super().__init__(status_code=404, detail=detail)


class InvalidInput(HTTPException):
    def __init__(self, detail: str = "Requête invalide"):
        super().__init__(status_code=400, detail=detail)


class ProcessorError(HTTPException):
    """Échec du processeur de paiement (Stripe). Aucun effet de bord local."""

    def __init__(self, detail: str = "Échec de création de l'intent de paiement"):
        super().__init__(status_code=500, detail=detail)


class StoreUnavailable(HTTPException):
    """Le document store (Supabase) n'a pas pu exécuter l'opération."""

    def __init__(self, detail: str = "Document store indisponible"):
        super().__init__(status_code=500, detail=detail)


class SettlementFailure(str, Enum):
    PERSIST_FAILED = "PersistFailed"
    RECONCILIATION_FAILED = "ReconciliationFailed"


class SettlementError(HTTPException):
    """
    Échec d'un règlement.
    - PersistFailed: le Payment n'a pas pu être créé (payment_id absent).
    - ReconciliationFailed: le Payment existe; payment_id et step permettent
      la reprise manuelle (voir settlement.resume_settlement).
    """

    def __init__(self, kind: SettlementFailure, step: str, payment_id: Optional[str] = None):
        self.kind = kind
        self.step = step
        self.payment_id = payment_id
        message = (
            "Échec d'enregistrement du paiement"
            if kind == SettlementFailure.PERSIST_FAILED
            else "Échec de réconciliation du paiement"
        )
        super().__init__(
            status_code=500,
            detail={"message": message, "error": kind.value, "paymentId": payment_id, "step": step},
        )
