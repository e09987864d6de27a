"""Domain value types for OnlyFacts."""

from enum import Enum


class VoteChoice(str, Enum):
    """A voter's stance on a fact."""

    AGREE = "agree"
    DISAGREE = "disagree"


class VotePolicy(str, Enum):
    """What happens when a voter votes again on the same fact.

    LOCKED: the first vote is final, any repeat vote is rejected.
    ALLOW_CHANGE: a different choice replaces the recorded one; repeating
    the same choice is still rejected.
    """

    LOCKED = "locked"
    ALLOW_CHANGE = "allow_change"
