"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable


logger = logging.getLogger(__name__)


class BaseUseCase(ABC):
    """
    Base class for all use cases.
    Use cases raise domain exceptions; routers translate them to HTTP responses.
    """

    @abstractmethod
    async def execute(self, *args: Any, **kwargs: Any) -> Any:
        """Run the use case."""
        pass

    def _notify(self, submit: Callable[..., None], *args: Any) -> None:
        """
        Hand a notification to the background queue. The write that triggered
        it has already been committed, so failures here are only logged.
        """
        try:
            submit(*args)
        except Exception as e:
            logger.error(f"Could not queue notification via {getattr(submit, '__name__', submit)}: {str(e)}")
