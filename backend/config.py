# backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

TEMPLATES_DIR = BASE_DIR / "templates"

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose le chemin des templates
- Normalise et expose les secrets/URLs (Supabase, Stripe), sécurité cookies, CORS/hosts
- Regroupe les réglages du panier et du checkout (devise, chemins de retour, politique de prix)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

# Supabase: backend de contenu (tables produits/catégories + stockage des images)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Catalogue: noms des tables et du bucket d'images
PRODUCTS_TABLE = _clean_env(os.getenv("PRODUCTS_TABLE") or "products")
CATEGORIES_TABLE = _clean_env(os.getenv("CATEGORIES_TABLE") or "categories")
PRODUCT_IMAGES_BUCKET = _clean_env(os.getenv("PRODUCT_IMAGES_BUCKET") or "product-images")
PLACEHOLDER_IMAGE_URL = _clean_env(os.getenv("PLACEHOLDER_IMAGE_URL") or "https://via.placeholder.com/150")

# Cookies / session: le panier vit dans la session signée côté navigateur
COOKIE_SECURE = _flag("COOKIE_SECURE")
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "replace_me_with_a_long_random_secret")
CART_STORAGE_KEY = _clean_env(os.getenv("CART_STORAGE_KEY") or "cart")
# Identifiant stable du navigateur dans la session (clé de rate limiting)
VISITOR_SESSION_KEY = "visitor"

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

# Stripe: clés publiques/privées
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or os.getenv("NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")

# Checkout: devise unique, chemins de retour relatifs à l'origine de la requête
CHECKOUT_CURRENCY = _clean_env(os.getenv("CHECKOUT_CURRENCY") or "usd").lower()
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/success")
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/cancel")

# Politique de prix: par défaut, le serveur recalcule les montants depuis le catalogue.
# CHECKOUT_TRUST_CLIENT_PRICES=true accepte le total client pour les lignes absentes du catalogue.
CHECKOUT_TRUST_CLIENT_PRICES = _flag("CHECKOUT_TRUST_CLIENT_PRICES")

# Vider le panier à l'affichage de /success (désactivé par défaut)
CLEAR_CART_ON_SUCCESS = _flag("CLEAR_CART_ON_SUCCESS")
