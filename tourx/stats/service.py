"""
Lecteurs de statistiques (tableaux de bord utilisateur, guide, admin).
Lecture seule, calculées à la demande; pas d'isolation entre les lectures successives.
Les réservations d'intent (Pending sans réservation réglée) ne comptent jamais.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable

from tourx.store import documents
from tourx.store.records import Collection, PAID
from tourx.utils.validators import parse_email

def _sum_prices(values: Iterable[Any]) -> float:
    total = sum((Decimal(str(v)) for v in values), Decimal("0"))
    return float(total.quantize(Decimal("0.01")))

def _payments_total(paid_only: bool, **filters: Any) -> float:
    if paid_only:
        filters["status"] = PAID
    payments = documents.find_many(Collection.PAYMENTS, filters)
    return _sum_prices(p.price for p in payments if not p.is_reservation)

def user_stats(email: str, paid_only: bool = False) -> Dict[str, Any]:
    owner = parse_email(email)
    return {
        "email": owner,
        "totalBookings": documents.count(Collection.BOOKINGS, email=owner),
        "totalSpent": _payments_total(paid_only, email=owner),
    }

def guide_stats(email: str) -> Dict[str, Any]:
    guide = parse_email(email)
    ratings = [float(r) for r in documents.column_values(Collection.REVIEWS, "rating", guide_email=guide)]
    return {
        "email": guide,
        "totalAssignedTours": documents.count(Collection.HIRED_GUIDES, email=guide),
        "totalReviews": len(ratings),
        "avgRating": round(sum(ratings) / len(ratings), 2) if ratings else 0,
    }

def admin_stats(paid_only: bool = False) -> Dict[str, Any]:
    return {
        "totalUsers": documents.count(Collection.USERS),
        "totalGuides": documents.count(Collection.GUIDES),
        "totalPackages": documents.count(Collection.PACKAGES),
        "totalBookings": documents.count(Collection.BOOKINGS),
        "totalRevenue": _payments_total(paid_only),
    }
