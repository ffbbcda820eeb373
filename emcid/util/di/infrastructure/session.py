"""Session infrastructure providers."""

from dishka import Scope, provide
from fastapi import Request

from emcid.persistence.session import SessionState
from emcid.util.di.base import ProviderBase


class SessionProvider(ProviderBase):
    """Visitor session component base."""

    __mock_component__ = "session"


class ProdSessionProvider(SessionProvider):
    """Production session provider backed by the signed session cookie."""

    __is_mock__ = False

    @provide(scope=Scope.REQUEST)
    def get_session_state(self, request: Request) -> SessionState:
        """Provide the session dict of the current request.

        Requires ``SessionMiddleware`` on the application.
        """
        return SessionState(request.session)
