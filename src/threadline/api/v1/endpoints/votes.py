# src/threadline/api/v1/endpoints/votes.py
"""Vote endpoints shared by posts and comments."""

from enum import StrEnum
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from threadline.api.v1.dependencies import CurrentUserDep, SessionDep
from threadline.core.errors import (
    ConcurrencyConflict,
    InvalidVoteValue,
    NotTargetAuthor,
    TargetNotFound,
)
from threadline.models import TargetKind
from threadline.repositories.target_repo import TargetRepository
from threadline.schemas.vote import (
    MyVoteResponse,
    MyVotesResponse,
    TargetVoteResponse,
    VoteRequest,
)
from threadline.services.vote_ledger import VoteLedger
from threadline.services.vote_reconciler import VoteOutcome, VoteReconciler

router = APIRouter(tags=["votes"])


class TargetCollection(StrEnum):
    """URL collections whose items accept votes."""

    POSTS = "posts"
    COMMENTS = "comments"

    @property
    def kind(self) -> TargetKind:
        return TargetKind.POST if self is TargetCollection.POSTS else TargetKind.COMMENT


def _to_response(outcome: VoteOutcome) -> TargetVoteResponse:
    return TargetVoteResponse(
        id=outcome.target_id,
        kind=outcome.kind.value,
        upvotes=outcome.upvotes,
        downvotes=outcome.downvotes,
        score=outcome.score,
        user_vote=int(outcome.current),
        author_karma=outcome.author_karma,
        karma_stale=outcome.karma_stale,
    )


@router.post("/{collection}/{target_id}/vote", response_model=TargetVoteResponse)
def cast_vote(
    collection: TargetCollection,
    target_id: int,
    vote_data: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> TargetVoteResponse:
    """Upvote (1), downvote (-1) or retract (0) a vote on a post or comment."""
    reconciler = VoteReconciler(db)
    try:
        outcome = reconciler.cast_vote(current_user.id, collection.kind, target_id, vote_data.value)
    except InvalidVoteValue as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid vote value",
        ) from err
    except TargetNotFound as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    except ConcurrencyConflict as err:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Vote could not be recorded due to concurrent updates, please retry",
        ) from err
    return _to_response(outcome)


@router.get("/{collection}/my-votes", response_model=MyVotesResponse)
def get_my_votes(
    collection: TargetCollection,
    ids: Annotated[list[int], Query(description="Target ids to look up")],
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVotesResponse:
    """Get the current user's votes on several posts or comments at once.

    Every requested id is present in the result; 0 means no vote.
    """
    states = VoteLedger(db).get_votes_for_targets(current_user.id, collection.kind, ids)
    return MyVotesResponse(votes={target_id: int(state) for target_id, state in states.items()})


@router.get("/{collection}/{target_id}/my-vote", response_model=MyVoteResponse)
def get_my_vote(
    collection: TargetCollection,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get the current user's vote on a post or comment (0 when none)."""
    kind = collection.kind
    if TargetRepository(db).get(kind, target_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{kind.value.capitalize()} not found",
        )
    state = VoteLedger(db).get_vote(current_user.id, kind, target_id)
    return MyVoteResponse(value=int(state))


@router.delete("/{collection}/{target_id}", status_code=status.HTTP_200_OK)
def delete_target(
    collection: TargetCollection,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, object]:
    """Remove a post or comment authored by the caller, with all votes on it."""
    reconciler = VoteReconciler(db)
    try:
        purged = reconciler.remove_target(current_user.id, collection.kind, target_id)
    except TargetNotFound as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    except NotTargetAuthor as err:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(err)) from err
    return {"status": "removed", "votes_purged": purged}
