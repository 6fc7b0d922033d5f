# src/threadline/services/__init__.py
"""Business logic services for the Threadline application."""

from .karma import KarmaRecalculator
from .vote_ledger import VoteLedger
from .vote_reconciler import VoteOutcome, VoteReconciler, plan_transition

__all__ = [
    "KarmaRecalculator",
    "VoteLedger",
    "VoteOutcome",
    "VoteReconciler",
    "plan_transition",
]
