"""
Registre central des routers (pages, API v1, health).
- Pages: produits, panier (formulaire), checkout, pages de fin de paiement
- API v1: catalogue, panier, paiements (+ chemin historique /api/payment)
- Health: health_router
"""
from fastapi import FastAPI
from backend.catalog import views as catalog_views
from backend.cart import views as cart_views
from backend.checkout import views as checkout_views
from backend.outcome import views as outcome_views
from backend.payments import views as payments_views
from backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    # Pages web (HTML)
    app.include_router(catalog_views.web_router)
    app.include_router(cart_views.web_router)
    app.include_router(checkout_views.web_router)
    app.include_router(outcome_views.web_router)
    # API v1
    app.include_router(catalog_views.router)
    app.include_router(cart_views.router)
    app.include_router(payments_views.router)
    app.include_router(payments_views.compat_router)
    # Health & monitoring
    app.include_router(health_router)
