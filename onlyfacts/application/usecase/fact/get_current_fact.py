"""Get current fact use case."""

from typing import Optional

from onlyfacts.domain.service import FactService

from .common import FactResponse


class GetCurrentFactUseCase:
    """Use case for retrieving the fact of the day."""

    def __init__(self, fact_service: FactService) -> None:
        """Initialize get current fact use case.

        Args:
            fact_service: Fact domain service
        """
        self.fact_service = fact_service

    async def execute(self) -> Optional[FactResponse]:
        """Execute get current fact flow.

        Returns:
            The most recently published fact, None if there is none
        """
        fact = await self.fact_service.get_current_fact()
        return FactResponse.from_fact(fact) if fact else None
