# tests/test_transitions.py
"""Tests for the vote transition table."""

import pytest

from threadline.models import VoteState
from threadline.services.vote_reconciler import LedgerAction, plan_transition

UP = VoteState.UPVOTED
NONE = VoteState.NO_VOTE
DOWN = VoteState.DOWNVOTED


@pytest.mark.parametrize(
    ("previous", "requested", "action", "up_delta", "down_delta"),
    [
        (NONE, NONE, LedgerAction.NONE, 0, 0),
        (NONE, UP, LedgerAction.CREATE, 1, 0),
        (NONE, DOWN, LedgerAction.CREATE, 0, 1),
        (UP, NONE, LedgerAction.DELETE, -1, 0),
        (UP, UP, LedgerAction.NONE, 0, 0),
        (UP, DOWN, LedgerAction.UPDATE, -1, 1),
        (DOWN, NONE, LedgerAction.DELETE, 0, -1),
        (DOWN, UP, LedgerAction.UPDATE, 1, -1),
        (DOWN, DOWN, LedgerAction.NONE, 0, 0),
    ],
)
def test_transition_table(previous, requested, action, up_delta, down_delta) -> None:
    transition = plan_transition(previous, requested)

    assert transition.ledger_action is action
    assert transition.upvotes_delta == up_delta
    assert transition.downvotes_delta == down_delta
    assert transition.is_noop is (action is LedgerAction.NONE)


def test_score_change_matches_state_difference() -> None:
    """Score moves by exactly requested - previous for every transition."""
    for previous in VoteState:
        for requested in VoteState:
            transition = plan_transition(previous, requested)
            score_delta = transition.upvotes_delta - transition.downvotes_delta
            assert score_delta == int(requested) - int(previous)


@pytest.mark.parametrize("value", [2, -2, 5, True, False, 1.0, "1", None])
def test_from_value_rejects_out_of_range(value) -> None:
    with pytest.raises(ValueError):
        VoteState.from_value(value)


@pytest.mark.parametrize(("value", "state"), [(1, UP), (0, NONE), (-1, DOWN)])
def test_from_value_accepts_tri_state(value, state) -> None:
    assert VoteState.from_value(value) is state
