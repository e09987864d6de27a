"""Get fact use case."""

from pydantic import BaseModel

from onlyfacts.domain.service import FactService

from .common import FactResponse, parse_fact_id


class GetFactRequest(BaseModel):
    """Get fact request."""

    fact_id: str  # UUID string


class GetFactUseCase:
    """Use case for retrieving a fact by ID."""

    def __init__(self, fact_service: FactService) -> None:
        self.fact_service = fact_service

    async def execute(self, request: GetFactRequest) -> FactResponse:
        """Execute get fact flow.

        Raises:
            NotFoundError: If the fact does not exist or the ID is malformed
        """
        fact = await self.fact_service.get_fact_by_id(parse_fact_id(request.fact_id))
        return FactResponse.from_fact(fact)
