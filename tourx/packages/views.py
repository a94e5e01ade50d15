"""Endpoints API pour le catalogue des forfaits (packages).
- Lecture publique: liste et détail.
- CRUD admin: création, mise à jour partielle, suppression (protégés par require_admin).
- Gestion d'erreurs: 400 identifiant/champ invalide, 404 introuvable, 500 en cas d'échec Supabase.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from tourx.errors import NotFound
from tourx.packages import repository as packages_repository
from tourx.utils.security import require_admin
from tourx.utils.validators import validate_identifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/package", tags=["Packages API"])

@router.get("")
def list_packages() -> List[Dict[str, Any]]:
    return [p.to_public() for p in packages_repository.list_packages()]

@router.get("/{package_id}")
def get_package(package_id: str) -> Dict[str, Any]:
    """Détail d'un forfait. 404 si introuvable."""
    pid = validate_identifier(package_id, "forfait")
    item = packages_repository.get_package(pid)
    if not item:
        raise NotFound("Forfait introuvable")
    return item.to_public()

@router.post("", dependencies=[Depends(require_admin)])
def create_package(body: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Crée un forfait (admin). Les champs sont validés par le document store (400 sinon)."""
    created = packages_repository.create_package(body)
    logger.info("packages.created id=%s name=%s", created.id, created.name)
    return {"acknowledged": True, "insertedId": created.id}

@router.patch("/{package_id}", dependencies=[Depends(require_admin)])
def update_package(package_id: str, body: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    pid = validate_identifier(package_id, "forfait")
    updated = packages_repository.update_package(pid, body)
    if updated is None:
        raise NotFound("Forfait introuvable")
    return {"acknowledged": True, "modifiedCount": 1, "package": updated.to_public()}

@router.delete("/{package_id}", dependencies=[Depends(require_admin)])
def delete_package(package_id: str) -> Dict[str, Any]:
    pid = validate_identifier(package_id, "forfait")
    deleted = packages_repository.delete_package(pid)
    if not deleted:
        raise NotFound("Forfait introuvable")
    logger.info("packages.deleted id=%s", pid)
    return {"acknowledged": True, "deletedCount": deleted}
