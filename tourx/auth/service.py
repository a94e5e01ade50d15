"""
Gate d'autorisation TourX.

- authenticate: jeton Bearer -> identité {email, claims, token} (401 sinon).
- authorize_role: relit le rôle en base via une fonction de lookup injectée (403 sinon).
- ensure_self_access: l'email du jeton doit être celui du chemin (403 sinon),
  pour empêcher de sonder le rôle d'un autre compte.
"""
import logging
from typing import Any, Callable, Dict, Optional

from tourx.auth.tokens import decode_token
from tourx.errors import Forbidden, Unauthenticated
from tourx.store.records import ROLES
from tourx.utils.validators import parse_email

logger = logging.getLogger(__name__)

RoleLookup = Callable[[str], Optional[str]]

def authenticate(credential: Optional[str]) -> Dict[str, Any]:
    token = (credential or "").strip()
    if not token:
        raise Unauthenticated()
    claims = decode_token(token)
    return {"email": claims["email"], "claims": claims, "token": token}

def authorize_role(identity: Dict[str, Any], required_role: str, role_lookup: RoleLookup) -> Dict[str, Any]:
    if required_role not in ROLES:
        raise ValueError(f"Rôle inconnu: {required_role}")
    email = (identity or {}).get("email")
    if not email:
        raise Unauthenticated()
    role = role_lookup(email)
    if role != required_role:
        logger.info("auth.authorize_role denied email=%s required=%s actual=%s", email, required_role, role)
        raise Forbidden("Accès interdit")
    return {**identity, "role": role}

def ensure_self_access(identity: Dict[str, Any], email: str) -> str:
    """Retourne l'email normalisé du chemin si et seulement s'il correspond au jeton."""
    target = parse_email(email)
    if (identity or {}).get("email") != target:
        raise Forbidden("Accès interdit")
    return target

def has_role(email: str, role: str, role_lookup: RoleLookup) -> bool:
    return role_lookup(email) == role
