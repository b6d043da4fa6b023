"""Theme results use case."""

import logfire
from pydantic import BaseModel

from jamvote.application.usecase.base import BaseUseCase
from jamvote.domain.service import VoteLedger


class ThemeResultItem(BaseModel):
    """Vote counts for one theme in response."""

    theme_id: int
    content: str
    yes_votes: int
    no_votes: int
    skip_votes: int
    total_votes: int


class GetThemeResultsRequest(BaseModel):
    """Theme results request (no parameters)."""


class GetThemeResultsResponse(BaseModel):
    """Theme results response."""

    results: list[ThemeResultItem]


class GetThemeResultsUseCase(BaseUseCase):
    """Use case for the running vote tally of every theme."""

    def __init__(self, vote_ledger: VoteLedger) -> None:
        """Initialize theme results use case.

        Args:
            vote_ledger: Vote ledger domain service
        """
        self.vote_ledger = vote_ledger

    async def execute(
        self, request: GetThemeResultsRequest | None = None
    ) -> GetThemeResultsResponse:
        """Execute theme results flow.

        Args:
            request: Theme results request

        Returns:
            Tallies ordered by yes votes, most popular first

        Raises:
            StorageUnavailableError: If storage cannot be reached
        """
        with logfire.span("get_theme_results.execute"):
            tallies = await self.vote_ledger.tally_votes()

            return GetThemeResultsResponse(
                results=[
                    ThemeResultItem(
                        theme_id=t.theme_id,
                        content=t.content,
                        yes_votes=t.yes_votes,
                        no_votes=t.no_votes,
                        skip_votes=t.skip_votes,
                        total_votes=t.total_votes,
                    )
                    for t in tallies
                ]
            )
