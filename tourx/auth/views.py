# module tourx.auth.views

"""Émission des jetons d'accès.
- POST /jwt: {email} -> {token}. Le jeton ne porte que l'email; le rôle est relu à chaque requête.
- Rate-limité (10 requêtes / 60s par client).
"""
import logging
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tourx.auth.tokens import issue_token
from tourx.store.records import Email
from tourx.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Auth API"])

class TokenRequest(BaseModel):
    email: Email

@router.post("/jwt", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_token(body: TokenRequest) -> Dict[str, str]:
    token = issue_token(body.email)
    logger.info("auth.jwt issued email=%s", body.email)
    return {"token": token}
