"""Import themes use case."""

from pydantic import BaseModel

from jamvote.application.usecase.base import BaseUseCase
from jamvote.domain.service import ThemeService


class ImportThemesRequest(BaseModel):
    """Import themes request."""

    lines: list[str]  # Raw lines of a themes file


class ImportThemesResponse(BaseModel):
    """Import themes response."""

    loaded: int
    skipped: int


class ImportThemesUseCase(BaseUseCase):
    """Use case for loading themes from a text file."""

    def __init__(self, theme_service: ThemeService) -> None:
        """Initialize import themes use case.

        Args:
            theme_service: Theme domain service
        """
        self.theme_service = theme_service

    async def execute(self, request: ImportThemesRequest) -> ImportThemesResponse:
        """Import themes, skipping comments, blanks and existing content.

        Args:
            request: Import themes request

        Returns:
            How many themes were loaded and skipped
        """
        summary = await self.theme_service.import_themes(request.lines)
        return ImportThemesResponse(loaded=summary.loaded, skipped=summary.skipped)
