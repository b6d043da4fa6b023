"""List themes use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from jamvote.application.usecase.base import BaseUseCase
from jamvote.domain.service import VoteLedger


class ThemeItem(BaseModel):
    """Theme item in response."""

    id: int
    content: str
    created_at: datetime


class ListThemesRequest(BaseModel):
    """List themes request (no parameters)."""


class ListThemesResponse(BaseModel):
    """List themes response."""

    themes: list[ThemeItem]


class ListThemesUseCase(BaseUseCase):
    """Use case for listing every theme open for voting."""

    def __init__(self, vote_ledger: VoteLedger) -> None:
        """Initialize list themes use case.

        Args:
            vote_ledger: Vote ledger domain service
        """
        self.vote_ledger = vote_ledger

    async def execute(
        self, request: ListThemesRequest | None = None
    ) -> ListThemesResponse:
        """Execute list themes flow.

        Args:
            request: List themes request

        Returns:
            All themes in creation order

        Raises:
            StorageUnavailableError: If storage cannot be reached
        """
        with logfire.span("list_themes.execute"):
            themes = await self.vote_ledger.list_themes()

            items = [
                ThemeItem(id=t.id, content=t.content, created_at=t.created_at)
                for t in themes
            ]
            logfire.info("Themes listed", count=len(items))

            return ListThemesResponse(themes=items)
