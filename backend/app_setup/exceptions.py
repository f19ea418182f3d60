"""
Gestionnaires d'exceptions utilisés par la factory.
- HTTPException: corps JSON {"detail": ...} pour les clients API.
- PaymentSessionError remontée hors de l'endpoint: {"error": ...} + 500, forme attendue par l'initiateur.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from backend.payments.cart import PaymentSessionError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(PaymentSessionError)
    async def payment_session_error_handler(request: Request, exc: PaymentSessionError):
        logger.warning("payment session error path=%s error=%s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
