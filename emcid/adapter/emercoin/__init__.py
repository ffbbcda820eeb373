"""EmercoinID adapter."""

from .client import (
    EmercoinIDClient,
    MockEmercoinIDClient,
    RealEmercoinIDClient,
)

__all__ = ["EmercoinIDClient", "RealEmercoinIDClient", "MockEmercoinIDClient"]
