"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn avec workers uvicorn) importe `tourx.asgi:app`.
- Toute la configuration FastAPI est centralisée dans tourx.app_setup.factory.
"""
from tourx.app_setup.factory import create_app

app = create_app()
