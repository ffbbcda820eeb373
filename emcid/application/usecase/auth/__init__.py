"""Authentication use cases."""

from .complete_login import CompleteLoginRequest, CompleteLoginUseCase
from .initiate_login import InitiateLoginRequest, InitiateLoginUseCase
from .redirect import LoginOutcome, LoginRedirect

__all__ = [
    "CompleteLoginRequest",
    "CompleteLoginUseCase",
    "InitiateLoginRequest",
    "InitiateLoginUseCase",
    "LoginOutcome",
    "LoginRedirect",
]
