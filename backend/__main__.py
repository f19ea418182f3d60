"""
Lancement local de la boutique.

Usage:
    python -m backend

Variables d'environnement lues:
- HOST / PORT: interface et port d'écoute (0.0.0.0:8000 par défaut)
- UVICORN_RELOAD: rechargement auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs uvicorn, qui porte aussi les loggers de l'application
"""
import os
import uvicorn


def main() -> None:
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    uvicorn.run(
        "backend.asgi:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
        reload=reload_flag,
        log_level=os.environ.get("LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
