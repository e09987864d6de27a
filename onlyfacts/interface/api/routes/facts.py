"""Fact routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from onlyfacts.application.usecase.fact import (
    CreateFactRequest,
    CreateFactUseCase,
    FactResponse,
    GetCurrentFactUseCase,
    GetFactRequest,
    GetFactUseCase,
    VoteOnFactRequest,
    VoteOnFactUseCase,
)
from onlyfacts.domain.error import DomainError, DuplicateVoteError
from onlyfacts.domain.value import VoteChoice
from onlyfacts.interface.error import (
    ErrorKind,
    domain_error_to_http,
    duplicate_vote_response,
    http_error,
)

router = APIRouter(prefix="/fact", tags=["facts"], route_class=DishkaRoute)


class CreateFactAPIRequest(BaseModel):
    """API request for publishing a fact."""

    content: str = Field(min_length=1, max_length=2000)


class VoteAPIRequest(BaseModel):
    """API request for voting on a fact.

    Also accepts the field names sent by the first web client
    (type, userId).
    """

    choice: VoteChoice = Field(validation_alias=AliasChoices("choice", "type"))
    voter_id: str = Field(
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("voterId", "voter_id", "userId"),
    )


@router.get("/current", response_model=FactResponse)
async def get_current_fact(
    get_current_fact_use_case: FromDishka[GetCurrentFactUseCase],
) -> FactResponse:
    """Get the fact of the day.

    Returns:
        The most recently published fact

    Raises:
        HTTPException: 404 if no fact has been published yet
    """
    fact = await get_current_fact_use_case.execute()
    if fact is None:
        raise http_error(
            status.HTTP_404_NOT_FOUND,
            ErrorKind.NOT_FOUND,
            "No fact has been published yet",
        )
    return fact


@router.post("", response_model=FactResponse, status_code=status.HTTP_201_CREATED)
async def create_fact(
    request: CreateFactAPIRequest,
    create_fact_use_case: FromDishka[CreateFactUseCase],
) -> FactResponse:
    """Publish a new fact; it becomes the current fact.

    Args:
        request: Fact content
        create_fact_use_case: Create fact use case from DI

    Returns:
        The created fact

    Raises:
        HTTPException: 400 if content is empty or too long
    """
    try:
        return await create_fact_use_case.execute(
            CreateFactRequest(content=request.content)
        )
    except DomainError as e:
        logfire.warn("Fact creation rejected", error=str(e))
        raise domain_error_to_http(e)


@router.get("/{fact_id}", response_model=FactResponse)
async def get_fact(
    fact_id: str,
    get_fact_use_case: FromDishka[GetFactUseCase],
) -> FactResponse:
    """Get a fact by ID.

    Raises:
        HTTPException: 404 if the fact does not exist
    """
    try:
        return await get_fact_use_case.execute(GetFactRequest(fact_id=fact_id))
    except DomainError as e:
        raise domain_error_to_http(e)


@router.patch("/{fact_id}/vote", response_model=FactResponse)
async def vote_on_fact(
    fact_id: str,
    request: VoteAPIRequest,
    vote_on_fact_use_case: FromDishka[VoteOnFactUseCase],
) -> FactResponse | JSONResponse:
    """Agree or disagree with a fact.

    The voter ID is generated by the client and not authenticated. The
    server's voter ledger, not the client's local state, decides whether
    the vote is a duplicate.

    Args:
        fact_id: Fact UUID
        request: Choice and voter ID
        vote_on_fact_use_case: Vote use case from DI

    Returns:
        The fact with updated tallies, or a 409 response carrying the
        previously recorded choice if the vote is a duplicate

    Raises:
        HTTPException: 404 unknown fact, 400 invalid input, 503 if the fact
            stayed busy
    """
    try:
        return await vote_on_fact_use_case.execute(
            VoteOnFactRequest(
                fact_id=fact_id,
                voter_id=request.voter_id,
                choice=request.choice,
            )
        )
    except DuplicateVoteError as e:
        return duplicate_vote_response(e)
    except DomainError as e:
        raise domain_error_to_http(e)
