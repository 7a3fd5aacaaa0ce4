# pharmapos/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmapos.api.v1.branches import router as branches_router
from pharmapos.api.v1.products import router as products_router
from pharmapos.api.v1.security import router as security_router
from pharmapos.api.v1.users import router as users_router
from pharmapos.core.config import settings
from pharmapos.core.logging import configure_logging
from pharmapos.middleware.branch_isolation import BranchIsolationMiddleware
from pharmapos.middleware.subscription import SubscriptionMiddleware


def create_app(session_factory=None, usage_provider=None) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
    )
    # None : SessionLocal (voir db.session.get_session_factory)
    app.state.session_factory = session_factory

    # Le dernier middleware ajouté s'exécute en premier :
    # CORS -> isolation par succursale -> contrôle d'abonnement
    app.add_middleware(SubscriptionMiddleware, usage_provider=usage_provider)
    app.add_middleware(BranchIsolationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    @app.get("/")
    def root():
        return {"message": f"Backend {settings.APP_NAME} actif"}

    @app.get("/health")
    def health_check():
        """Endpoint de santé pour les load balancers"""
        return {"status": "healthy"}

    # Inclure les routes
    app.include_router(security_router)
    app.include_router(products_router)
    app.include_router(users_router)
    app.include_router(branches_router)

    return app


app = create_app()
