"""Create fact use case."""

from pydantic import BaseModel

from onlyfacts.domain.service import FactService

from .common import FactResponse


class CreateFactRequest(BaseModel):
    """Create fact request."""

    content: str


class CreateFactUseCase:
    """Use case for publishing a new fact."""

    def __init__(self, fact_service: FactService) -> None:
        """Initialize create fact use case.

        Args:
            fact_service: Fact domain service
        """
        self.fact_service = fact_service

    async def execute(self, request: CreateFactRequest) -> FactResponse:
        """Execute create fact flow.

        Args:
            request: Create fact request

        Returns:
            The published fact

        Raises:
            ValidationError: If content is empty or too long
        """
        fact = await self.fact_service.create_fact(request.content)
        return FactResponse.from_fact(fact)
