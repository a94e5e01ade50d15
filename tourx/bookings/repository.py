"""Accès aux réservations (collection bookings). Une réservation existante est « en attente »."""
from typing import Any, Dict, List, Optional

from tourx.store import documents
from tourx.store.records import BookingRecord, Collection

def list_bookings_by_email(email: str) -> List[BookingRecord]:
    return documents.find_many(Collection.BOOKINGS, {"email": email}, order_by="date")

def get_booking(booking_id: str) -> Optional[BookingRecord]:
    return documents.find_by_id(Collection.BOOKINGS, booking_id)

def create_booking(data: Dict[str, Any]) -> BookingRecord:
    return documents.insert_one(Collection.BOOKINGS, data)

def delete_booking(booking_id: str) -> int:
    return documents.delete_by_id(Collection.BOOKINGS, booking_id)
