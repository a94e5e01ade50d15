"""
Types de documents par collection (un modèle Pydantic par table Supabase).

- Noms de champs = colonnes (snake_case); alias = format JSON côté API (camelCase
  hérité du front TourX). populate_by_name permet de valider les deux.
- Les contraintes sont portées par des types Annotated afin d'être réutilisables
  champ par champ lors des mises à jour partielles (voir documents.validate_changes).
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Type

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from tourx.utils.validators import normalize_email


class Collection(str, Enum):
    USERS = "users"
    PACKAGES = "packages"
    BOOKINGS = "bookings"
    PAYMENTS = "payments"
    GUIDES = "guides"
    HIRED_GUIDES = "hiredguides"
    REVIEWS = "reviews"


ROLES = ("customer", "guide", "admin")
PENDING = "Pending"
PAID = "Paid"

Role = Literal["customer", "guide", "admin"]
PaymentStatus = Literal["Pending", "Paid"]

DocumentId = Annotated[str, BeforeValidator(lambda v: str(v) if v is not None else v)]
Email = Annotated[str, AfterValidator(normalize_email)]
NonEmpty = Annotated[str, Field(min_length=1)]
# Decimal en base (chaîne "80.00"), nombre JSON côté API
Price = Annotated[
    Decimal,
    Field(ge=0, decimal_places=2),
    AfterValidator(lambda v: v.quantize(Decimal("0.01"))),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[DocumentId] = None

    def to_public(self) -> Dict[str, Any]:
        """Représentation JSON exposée par l'API (alias camelCase)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserRecord(Record):
    email: Email
    role: Role = "customer"
    name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")


class PackageRecord(Record):
    name: NonEmpty
    tour_type: NonEmpty = Field(alias="tourType")
    price: Price
    description: Optional[str] = None
    image: Optional[str] = None


class BookingRecord(Record):
    email: Email
    package_id: NonEmpty = Field(alias="packageId")
    package_name: Optional[str] = Field(default=None, alias="packageName")
    guide_name: Optional[str] = Field(default=None, alias="guideName")
    date: NonEmpty
    price: Price


class PaymentRecord(Record):
    email: Email
    price: Price
    booking_ids: List[str] = Field(default_factory=list, alias="bookingItemIDs")
    status: PaymentStatus = PENDING
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    intent_id: Optional[str] = Field(default=None, alias="intentId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @property
    def is_reservation(self) -> bool:
        """Réservation d'intent (Pending, aucune réservation réglée): pas encore un paiement soumis."""
        return self.status == PENDING and not self.booking_ids


class GuideRecord(Record):
    name: NonEmpty
    email: Email
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    specialty: Optional[str] = None


class HiredGuideRecord(Record):
    guide_id: NonEmpty = Field(alias="guideId")
    date: NonEmpty
    name: NonEmpty
    email: Email
    booked_by: NonEmpty = Field(alias="bookedBy")


class ReviewRecord(Record):
    guide_email: Email = Field(alias="guideEmail")
    rating: Annotated[float, Field(ge=0, le=5)]
    comment: Optional[str] = None


RECORD_TYPES: Dict[Collection, Type[Record]] = {
    Collection.USERS: UserRecord,
    Collection.PACKAGES: PackageRecord,
    Collection.BOOKINGS: BookingRecord,
    Collection.PAYMENTS: PaymentRecord,
    Collection.GUIDES: GuideRecord,
    Collection.HIRED_GUIDES: HiredGuideRecord,
    Collection.REVIEWS: ReviewRecord,
}
