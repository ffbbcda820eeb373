"""Base use case."""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services.

    Login use cases take a request model and answer with a redirect.
    """

    @abstractmethod
    async def execute(self, request: BaseModel) -> BaseModel:
        pass
