# module tourx.users.views

"""Endpoints du domaine Utilisateurs.
- POST /users: création idempotente à la première connexion (aucun rôle accepté du client).
- GET /users/admin/{email}, GET /users/guide/{email}: drapeaux de rôle, pour soi-même uniquement.
- Administration (require_admin): liste, suppression, promotion admin/guide.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from tourx.auth.service import ensure_self_access, has_role
from tourx.errors import NotFound
from tourx.store.records import Email
from tourx.users import repository as users_repository
from tourx.utils.security import get_role_lookup, require_admin, require_user
from tourx.utils.validators import validate_identifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["Users API"])

class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Email
    name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")

@router.post("")
def create_user(body: UserCreate) -> Dict[str, Any]:
    created = users_repository.insert_user_if_absent(body.model_dump(exclude_none=True))
    if created is None:
        return {"message": "user already exists", "insertedId": None}
    logger.info("users.created id=%s email=%s", created.id, created.email)
    return {"acknowledged": True, "insertedId": created.id}

@router.get("", dependencies=[Depends(require_admin)])
def list_users() -> List[Dict[str, Any]]:
    return [u.to_public() for u in users_repository.list_users()]

@router.delete("/{user_id}", dependencies=[Depends(require_admin)])
def delete_user(user_id: str) -> Dict[str, Any]:
    uid = validate_identifier(user_id, "utilisateur")
    deleted = users_repository.delete_user(uid)
    if not deleted:
        raise NotFound("Utilisateur introuvable")
    logger.info("users.deleted id=%s", uid)
    return {"acknowledged": True, "deletedCount": deleted}

@router.get("/admin/{email}")
def is_admin(email: str, identity: Dict[str, Any] = Depends(require_user), role_lookup=Depends(get_role_lookup)):
    target = ensure_self_access(identity, email)
    return {"admin": has_role(target, "admin", role_lookup)}

@router.get("/guide/{email}")
def is_guide(email: str, identity: Dict[str, Any] = Depends(require_user), role_lookup=Depends(get_role_lookup)):
    target = ensure_self_access(identity, email)
    return {"guide": has_role(target, "guide", role_lookup)}

def _set_role(user_id: str, role: str) -> Dict[str, Any]:
    uid = validate_identifier(user_id, "utilisateur")
    updated = users_repository.set_role(uid, role)
    if updated is None:
        raise NotFound("Utilisateur introuvable")
    logger.info("users.role_changed id=%s role=%s", uid, role)
    return {"acknowledged": True, "modifiedCount": 1, "user": updated.to_public()}

@router.patch("/admin/{user_id}", dependencies=[Depends(require_admin)])
def make_admin(user_id: str):
    return _set_role(user_id, "admin")

@router.patch("/guide/{user_id}", dependencies=[Depends(require_admin)])
def make_guide(user_id: str):
    return _set_role(user_id, "guide")
