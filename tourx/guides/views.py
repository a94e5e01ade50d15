# module tourx.guides.views
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from tourx.errors import NotFound
from tourx.guides import repository as guides_repository
from tourx.utils.security import require_admin
from tourx.utils.validators import validate_identifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/guides", tags=["Guides API"])

@router.get("")
def list_guides() -> List[Dict[str, Any]]:
    return [g.to_public() for g in guides_repository.list_guides()]

@router.get("/{guide_id}")
def get_guide(guide_id: str) -> Dict[str, Any]:
    gid = validate_identifier(guide_id, "guide")
    guide = guides_repository.get_guide(gid)
    if not guide:
        raise NotFound("Guide introuvable")
    return guide.to_public()

@router.post("", dependencies=[Depends(require_admin)])
def create_guide(body: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    created = guides_repository.create_guide(body)
    logger.info("guides.created id=%s email=%s", created.id, created.email)
    return {"acknowledged": True, "insertedId": created.id}
