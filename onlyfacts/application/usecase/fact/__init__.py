"""Fact use cases."""

from .common import FactResponse
from .create_fact import CreateFactRequest, CreateFactUseCase
from .get_current_fact import GetCurrentFactUseCase
from .get_fact import GetFactRequest, GetFactUseCase
from .vote_on_fact import VoteOnFactRequest, VoteOnFactUseCase

__all__ = [
    "CreateFactRequest",
    "CreateFactUseCase",
    "FactResponse",
    "GetCurrentFactUseCase",
    "GetFactRequest",
    "GetFactUseCase",
    "VoteOnFactRequest",
    "VoteOnFactUseCase",
]
