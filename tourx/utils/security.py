from fastapi import Request, Depends
from typing import Any, Callable, Dict, Optional

from tourx.auth import service as auth_service
from tourx.users import repository as users_repository

def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip()
    return None

def get_current_identity(request: Request) -> Dict[str, Any]:
    # Bearer uniquement: l'API TourX n'utilise pas de cookie de session
    return auth_service.authenticate(_bearer_token(request))

def require_user(identity: Dict[str, Any] = Depends(get_current_identity)) -> Dict[str, Any]:
    return identity

def get_role_lookup() -> Callable[[str], Optional[str]]:
    """
    Capacité de lookup du rôle, injectée dans les dépendances de rôle.
    Surchargée en test via app.dependency_overrides[get_role_lookup].
    """
    return users_repository.get_role_by_email

def require_role(role: str):
    def _dep(
        identity: Dict[str, Any] = Depends(get_current_identity),
        role_lookup: Callable[[str], Optional[str]] = Depends(get_role_lookup),
    ) -> Dict[str, Any]:
        return auth_service.authorize_role(identity, role, role_lookup)
    return _dep

require_admin = require_role("admin")
require_guide = require_role("guide")
