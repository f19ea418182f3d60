from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.sessions import SessionMiddleware
from backend.config import COOKIE_SECURE, CORS_ORIGINS, ALLOWED_HOSTS, SESSION_SECRET_KEY

"""
Middlewares transverses de l'application.
- register_basic_middlewares: session (porte le panier), CORS, TrustedHost.
- register_no_cache_middleware: empêche la mise en cache des pages et réponses liées au panier.
"""

NO_CACHE_PREFIXES = ("/checkout", "/success", "/cancel", "/api/v1/cart")

def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - SessionMiddleware: cookie signé côté navigateur; le panier y est stocké sous la clé "cart".
    - CORSMiddleware: autorise les origines définies (dev/prod).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    """
    app.add_middleware(
        SessionMiddleware,
        secret_key=SESSION_SECRET_KEY,
        same_site="lax",
        https_only=COOKIE_SECURE,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )

def register_no_cache_middleware(app: FastAPI) -> None:
    """
    Empêche la mise en cache de l'état du panier:
    - S'applique aux GET sur /checkout, /success, /cancel et à l'API panier.
    - Ajoute les en-têtes Cache-Control/Pragma/Expires pour forcer le rechargement.
    """
    @app.middleware("http")
    async def no_cache_for_cart(request: Request, call_next):
        response = await call_next(request)
        path = request.url.path.rstrip("/")
        if request.method == "GET" and path.startswith(NO_CACHE_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response
