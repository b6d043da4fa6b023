"""Get next theme use case."""

import logfire
from pydantic import BaseModel

from jamvote.application.usecase.base import BaseUseCase
from jamvote.application.usecase.theme.list_themes import ThemeItem
from jamvote.domain.service import ThemeService
from jamvote.domain.value import UserId


class GetNextThemeRequest(BaseModel):
    """Get next theme request."""

    user_id: str


class GetNextThemeResponse(BaseModel):
    """Get next theme response.

    `theme` is None once the user has voted on every theme.
    """

    theme: ThemeItem | None
    total: int
    seen: int


class GetNextThemeUseCase(BaseUseCase):
    """Use case for picking the next theme a user should vote on."""

    def __init__(self, theme_service: ThemeService) -> None:
        """Initialize get next theme use case.

        Args:
            theme_service: Theme domain service
        """
        self.theme_service = theme_service

    async def execute(self, request: GetNextThemeRequest) -> GetNextThemeResponse:
        """Execute get next theme flow.

        Args:
            request: Get next theme request

        Returns:
            A random theme the user has not voted on, with progress counts

        Raises:
            StorageUnavailableError: If storage cannot be reached
        """
        with logfire.span("get_next_theme.execute", user_id=request.user_id):
            progress = await self.theme_service.next_theme_for_user(
                UserId(request.user_id)
            )

            theme = None
            if progress.theme is not None:
                theme = ThemeItem(
                    id=progress.theme.id,
                    content=progress.theme.content,
                    created_at=progress.theme.created_at,
                )

            return GetNextThemeResponse(
                theme=theme, total=progress.total, seen=progress.seen
            )
