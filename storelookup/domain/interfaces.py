"""
Domain Layer: Interfaces (Abstract Contracts)
-------------------------------------------
What the application layer needs from a store client. The concrete
AppStoreClient / PlayStoreClient live in the infrastructure layer.

The application layer depends on these, so tests can hand LookupService
a fake client without any HTTP at all.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from .entities import Detail, LookupKey, LookupResponse


class IAppStoreClient(ABC):
    """Contract for anything that can resolve an App Store lookup key."""

    @abstractmethod
    async def lookup(self, key: LookupKey) -> LookupResponse:
        """
        Fetch and decode one lookup.

        Raises:
            ValidationError: key has neither store id nor bundle id
            StatusError: upstream answered non-2xx
            ParseError: body is not a valid lookup document
            httpx.RequestError: network failure, unwrapped
        """
        ...


class IPlayStoreClient(ABC):
    """Contract for anything that can fetch a Play Store listing."""

    @abstractmethod
    async def get(self, bundle_id: str) -> Detail:
        """
        Fetch one details page and extract a Detail from it.
        Same failure classes as IAppStoreClient.lookup.
        """
        ...
