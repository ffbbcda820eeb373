"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from emcid.config import Settings
from emcid.interface.api.routes import auth, health, messages
from emcid.util.di.container import create_container, setup_di
from emcid.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use instead of the production one
    """
    settings = Settings()

    # Logfire must be configured before instrumentation
    instrument_httpx()

    app_instance = FastAPI(
        title="EmercoinID Login",
        description="Certificate-backed login through EmercoinID",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    # Signed cookie session holding the login transaction and the login itself
    app_instance.add_middleware(
        SessionMiddleware,
        secret_key=settings.session.secret_key,
        session_cookie=settings.session.cookie_name,
        max_age=settings.session.max_age,
        same_site="lax",
        https_only=settings.session.https_only,
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(messages.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
