from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from backend.health import service as health_service
from backend.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    return {
        "ok": True,
        "catalog_configured": getattr(request.app.state, "catalog_configured", None),
        "payments_configured": getattr(request.app.state, "payments_configured", None),
    }

@router.get("/supabase")
def health_supabase():
    return JSONResponse(health_service.catalog_health_info())

@router.get("/payments")
def health_payments():
    return health_service.payments_health_info()

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)
