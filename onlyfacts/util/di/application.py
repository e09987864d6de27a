"""Application layer DI providers."""

from dishka import Scope, provide

from onlyfacts.application.usecase.fact import (
    CreateFactUseCase,
    GetCurrentFactUseCase,
    GetFactUseCase,
    VoteOnFactUseCase,
)
from onlyfacts.domain.service import FactService
from onlyfacts.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_create_fact_use_case(self, fact_service: FactService) -> CreateFactUseCase:
        """Provide create fact use case."""
        return CreateFactUseCase(fact_service=fact_service)

    @provide(scope=Scope.REQUEST)
    def get_current_fact_use_case(
        self, fact_service: FactService
    ) -> GetCurrentFactUseCase:
        """Provide get current fact use case."""
        return GetCurrentFactUseCase(fact_service=fact_service)

    @provide(scope=Scope.REQUEST)
    def get_get_fact_use_case(self, fact_service: FactService) -> GetFactUseCase:
        """Provide get fact use case."""
        return GetFactUseCase(fact_service=fact_service)

    @provide(scope=Scope.REQUEST)
    def get_vote_on_fact_use_case(
        self, fact_service: FactService
    ) -> VoteOnFactUseCase:
        """Provide vote on fact use case."""
        return VoteOnFactUseCase(fact_service=fact_service)
