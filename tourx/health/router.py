from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from tourx.health import service as health_service
from tourx.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    return {"ok": True, "rate_limit": rate_limit_health_info(request)}

@router.get("/store")
def health_store():
    return JSONResponse(health_service.health_store_info())
