"""Domain layer DI providers."""

from dishka import Scope, provide

from onlyfacts.config import VotingSettings
from onlyfacts.domain.repository import FactRepository
from onlyfacts.domain.service import FactService
from onlyfacts.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_fact_service(
        self, fact_repository: FactRepository, voting_settings: VotingSettings
    ) -> FactService:
        """Provide fact domain service."""
        return FactService(
            fact_repository=fact_repository,
            vote_policy=voting_settings.policy,
            max_vote_attempts=voting_settings.max_attempts,
        )
