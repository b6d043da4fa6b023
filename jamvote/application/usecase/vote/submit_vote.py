"""Submit vote use case."""

from datetime import datetime

from pydantic import BaseModel

from jamvote.application.usecase.base import BaseUseCase
from jamvote.domain.service import VoteLedger
from jamvote.domain.value import ThemeId, UserId


class SubmitVoteRequest(BaseModel):
    """Submit vote request."""

    user_id: str  # From the authenticated credential
    theme_id: int
    vote_type: str  # Validated by the ledger


class SubmitVoteResponse(BaseModel):
    """Submit vote response."""

    id: int
    created_at: datetime


class SubmitVoteUseCase(BaseUseCase):
    """Use case for casting a yes/no/skip vote on a theme."""

    def __init__(self, vote_ledger: VoteLedger) -> None:
        """Initialize submit vote use case.

        Args:
            vote_ledger: Vote ledger domain service
        """
        self.vote_ledger = vote_ledger

    async def execute(self, request: SubmitVoteRequest) -> SubmitVoteResponse:
        """Record the vote.

        Args:
            request: Submit vote request

        Returns:
            Id and timestamp of the recorded vote

        Raises:
            InvalidVoteKindError: If vote_type is not yes, no or skip
            ThemeNotFoundError: If the theme does not exist
            DuplicateVoteError: If the user already voted on the theme
            StorageUnavailableError: If storage cannot be reached
        """
        vote = await self.vote_ledger.record_vote(
            UserId(request.user_id), ThemeId(request.theme_id), request.vote_type
        )
        return SubmitVoteResponse(id=vote.id, created_at=vote.created_at)
