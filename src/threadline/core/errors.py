"""Exception hierarchy for the voting core.

    VotingError
    ├── InvalidVoteValue (ValueError)
    ├── TargetNotFound (LookupError)
    ├── NotTargetAuthor
    ├── ConcurrencyConflict
    └── KarmaRecalculationFailure
"""

from __future__ import annotations


class VotingError(Exception):
    """Base exception for all voting-core errors."""


class InvalidVoteValue(VotingError, ValueError):
    """Requested vote value is outside {-1, 0, +1}."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid vote value: {value!r} (expected -1, 0 or 1)")


class TargetNotFound(VotingError, LookupError):
    """The vote target does not resolve to an existing post or comment."""

    def __init__(self, kind: str, target_id: int) -> None:
        self.kind = kind
        self.target_id = target_id
        super().__init__(f"{kind.capitalize()} not found")


class NotTargetAuthor(VotingError):
    """Only the author may remove a post or comment."""

    def __init__(self, kind: str, target_id: int) -> None:
        self.kind = kind
        self.target_id = target_id
        super().__init__(f"Not authorized to delete this {kind}")


class ConcurrencyConflict(VotingError):
    """A vote kept colliding with concurrent writers until retries ran out."""

    def __init__(self, attempts: int, cause: Exception | None = None) -> None:
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Vote could not be recorded after {attempts} attempts")


class KarmaRecalculationFailure(VotingError):
    """Recomputing an author's karma failed; the vote itself stays committed."""

    def __init__(self, user_id: int, cause: Exception | None = None) -> None:
        self.user_id = user_id
        self.cause = cause
        super().__init__(f"Karma recalculation failed for user {user_id}")
