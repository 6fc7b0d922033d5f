"""Pydantic schemas for the Threadline API."""

from .user import UserKarmaResponse
from .vote import MyVoteResponse, MyVotesResponse, TargetVoteResponse, VoteRequest

__all__ = [
    "MyVoteResponse",
    "MyVotesResponse",
    "TargetVoteResponse",
    "UserKarmaResponse",
    "VoteRequest",
]
