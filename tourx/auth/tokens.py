"""
Jetons d'accès TourX (JWT HS256).
- Le jeton ne porte que l'email (claim "email") et une expiration.
- Aucun rôle n'est embarqué: le rôle est relu en base à chaque requête (voir auth.service).
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import HTTPException

from tourx import config
from tourx.errors import Unauthenticated
from tourx.utils.validators import normalize_email

def _secret() -> str:
    if not config.ACCESS_TOKEN_SECRET:
        raise HTTPException(status_code=500, detail="ACCESS_TOKEN_SECRET manquant")
    return config.ACCESS_TOKEN_SECRET

def issue_token(email: str, ttl_seconds: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = config.ACCESS_TOKEN_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    payload = {
        "email": normalize_email(email),
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, _secret(), algorithm=config.JWT_ALGORITHM)

def decode_token(token: str) -> Dict[str, Any]:
    """
    Vérifie signature + expiration et retourne les claims.
    Toute anomalie (jeton absent, mal formé, signature/expiration invalide) -> Unauthenticated.
    """
    if not token:
        raise Unauthenticated()
    try:
        claims = jwt.decode(
            token,
            _secret(),
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Session expirée, veuillez vous connecter")
    except jwt.PyJWTError:
        raise Unauthenticated("Jeton invalide")
    try:
        claims["email"] = normalize_email(claims.get("email"))
    except ValueError:
        raise Unauthenticated("Jeton sans email valide")
    return claims
