# module tourx.bookings.views

"""Endpoints Réservations.
- GET /bookings?email=: réservations en attente du client (self-access).
- POST /bookings: crée une réservation pour le porteur du jeton; le propriétaire doit exister.
- DELETE /bookings/{id}: annulation par le propriétaire.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from tourx.auth.service import ensure_self_access
from tourx.bookings import repository as bookings_repository
from tourx.errors import Forbidden, NotFound
from tourx.store.records import Email, NonEmpty, Price
from tourx.users import repository as users_repository
from tourx.utils.security import require_user
from tourx.utils.validators import validate_identifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["Bookings API"])

class BookingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Email
    package_id: NonEmpty = Field(alias="packageId")
    package_name: Optional[str] = Field(default=None, alias="packageName")
    guide_name: Optional[str] = Field(default=None, alias="guideName")
    date: NonEmpty
    price: Price

@router.get("")
def list_bookings(email: str, identity: Dict[str, Any] = Depends(require_user)) -> List[Dict[str, Any]]:
    owner = ensure_self_access(identity, email)
    return [b.to_public() for b in bookings_repository.list_bookings_by_email(owner)]

@router.post("")
def create_booking(body: BookingCreate, identity: Dict[str, Any] = Depends(require_user)) -> Dict[str, Any]:
    if body.email != identity["email"]:
        raise Forbidden("Accès interdit")
    if users_repository.get_user_by_email(body.email) is None:
        raise NotFound("Utilisateur introuvable")
    created = bookings_repository.create_booking(body.model_dump(exclude_none=True))
    logger.info("bookings.created id=%s email=%s price=%s", created.id, created.email, created.price)
    return {"acknowledged": True, "insertedId": created.id}

@router.delete("/{booking_id}")
def cancel_booking(booking_id: str, identity: Dict[str, Any] = Depends(require_user)) -> Dict[str, Any]:
    bid = validate_identifier(booking_id, "réservation")
    booking = bookings_repository.get_booking(bid)
    if booking is None:
        raise NotFound("Réservation introuvable")
    if booking.email != identity["email"]:
        raise Forbidden("Accès interdit")
    deleted = bookings_repository.delete_booking(bid)
    logger.info("bookings.cancelled id=%s deleted=%s", bid, deleted)
    return {"acknowledged": True, "deletedCount": deleted}
