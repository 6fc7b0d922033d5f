"""Vote-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VoteRequest(BaseModel):
    """Body of a vote request.

    The value is passed through untouched and validated by the reconciler:
    anything but the integers -1, 0 and 1 (including booleans, numeric
    strings and floats) is a 400.
    """

    value: Any = Field(
        ...,
        description="1 for upvote, -1 for downvote, 0 to retract",
        json_schema_extra={"type": "integer", "enum": [-1, 0, 1]},
    )


class TargetVoteResponse(BaseModel):
    """Counters of a target after a vote was recorded."""

    id: int
    kind: str
    upvotes: int
    downvotes: int
    score: int
    user_vote: int = Field(..., description="The caller's vote after this request")
    author_karma: int | None = Field(
        None,
        description="Author karma after recompute; null if the recompute failed",
    )
    karma_stale: bool = False

    model_config = ConfigDict(from_attributes=True)


class MyVoteResponse(BaseModel):
    """The caller's current vote on a target (0 means no vote)."""

    value: int


class MyVotesResponse(BaseModel):
    """The caller's votes on several targets, keyed by target id."""

    votes: dict[int, int]
