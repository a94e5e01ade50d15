"""
Registre central des routers.
- Comptes: auth (jetons), users
- Catalogue: packages, guides
- Cœur: bookings, payments, stats
- Health
"""
from fastapi import FastAPI
from tourx.auth import views as auth_views
from tourx.users import views as users_views
from tourx.packages import views as packages_views
from tourx.guides import views as guides_views
from tourx.bookings import views as bookings_views
from tourx.payments import views as payments_views
from tourx.stats import views as stats_views
from tourx.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(auth_views.router)
    app.include_router(users_views.router)
    app.include_router(packages_views.router)
    app.include_router(guides_views.router)
    app.include_router(bookings_views.router)
    app.include_router(payments_views.router)
    app.include_router(stats_views.router)
    # Health & monitoring
    app.include_router(health_router)
