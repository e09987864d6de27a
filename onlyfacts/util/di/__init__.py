"""Dependency injection module.

Providers are listed once, by layer. A provider base with subclasses is a
mockable component: the subclass flagged ``__is_mock__`` replaces the
production one in tests.
"""

from typing import Type

from onlyfacts.util.di.application import ProdApplicationProvider
from onlyfacts.util.di.base import Component, ProviderBase
from onlyfacts.util.di.core import ProdConfigProvider
from onlyfacts.util.di.domain import ProdDomainProvider
from onlyfacts.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
)
from onlyfacts.util.error import DependencyInjectionError

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,  # mockable: "persistence"
]


def is_mockable(base: Type[ProviderBase]) -> bool:
    """Whether a provider base has interchangeable implementations."""
    return bool(base.__subclasses__())


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for a PROVIDERS entry.

    Args:
        base: Entry from PROVIDERS
        use_mock: Select the mock implementation of a mockable component

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If the component has no such implementation
            (e.g. the mock was never imported)
    """
    if not is_mockable(base):
        return base

    for impl in base.__subclasses__():
        if impl.__is_mock__ == use_mock:
            return impl

    raise DependencyInjectionError(
        f"No {'mock' if use_mock else 'production'} implementation for "
        f"{base.__mock_component__ or base.__name__}"
    )


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "is_mockable",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
