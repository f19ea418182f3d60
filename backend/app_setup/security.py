from urllib.parse import urlparse
from fastapi import FastAPI
from backend.config import SUPABASE_URL, COOKIE_SECURE, PLACEHOLDER_IMAGE_URL

def _origin(url: str) -> str:
    p = urlparse(url or "")
    return f"{p.scheme}://{p.netloc}" if p.scheme and p.netloc else ""

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        # CSP: images du stockage Supabase et du placeholder; Stripe pour le paiement
        img_sources = [s for s in (_origin(SUPABASE_URL), _origin(PLACEHOLDER_IMAGE_URL)) if s]
        swagger_cdns = ["https://cdn.jsdelivr.net", "https://unpkg.com"]
        stripe_sources = ["https://js.stripe.com", "https://checkout.stripe.com"]
        connect_sources = ["'self'"] + ([_origin(SUPABASE_URL)] if SUPABASE_URL else [])

        csp = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            f"img-src 'self' data: blob: https://fastapi.tiangolo.com {' '.join(img_sources)}; "
            f"style-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            f"script-src 'self' 'unsafe-inline' {' '.join(swagger_cdns + stripe_sources)}; "
            f"connect-src {' '.join(connect_sources + stripe_sources)}"
        )
        response.headers["Content-Security-Policy"] = csp

        return response
