# module tourx.stats.views

"""Statistiques des tableaux de bord.
- /user-stats/{email}: utilisateur authentifié.
- /guide-stats/{email}: rôle guide.
- /admin-stats: rôle admin.
paidOnly=true restreint les sommes aux paiements Paid.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from tourx.stats import service as stats_service
from tourx.utils.security import require_admin, require_guide, require_user

router = APIRouter(tags=["Stats API"])

@router.get("/user-stats/{email}", dependencies=[Depends(require_user)])
def user_stats(email: str, paid_only: bool = Query(False, alias="paidOnly")) -> Dict[str, Any]:
    return stats_service.user_stats(email, paid_only=paid_only)

@router.get("/guide-stats/{email}", dependencies=[Depends(require_guide)])
def guide_stats(email: str) -> Dict[str, Any]:
    return stats_service.guide_stats(email)

@router.get("/admin-stats", dependencies=[Depends(require_admin)])
def admin_stats(paid_only: bool = Query(False, alias="paidOnly")) -> Dict[str, Any]:
    return stats_service.admin_stats(paid_only=paid_only)
