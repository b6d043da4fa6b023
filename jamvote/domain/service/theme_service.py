"""Theme domain service."""

from collections.abc import Iterable

import logfire
from pydantic import BaseModel

from jamvote.domain.error import StorageUnavailableError
from jamvote.domain.model import Theme
from jamvote.domain.repository import ThemeRepository, VoteRepository
from jamvote.domain.value import UserId

from .base import STORAGE_UNAVAILABLE_ERRORS, Service


class ImportSummary(BaseModel):
    """Outcome of a theme import run."""

    loaded: int = 0
    skipped: int = 0


class ThemeProgress(BaseModel):
    """Next theme to show a user, with voting progress."""

    theme: Theme | None
    total: int
    seen: int


def parse_theme_lines(lines: Iterable[str]) -> list[str]:
    """Extract theme texts from import file lines.

    Blank lines and lines starting with '#' are ignored.
    """
    themes = []
    for line in lines:
        content = line.strip()
        if not content or content.startswith("#"):
            continue
        themes.append(content)
    return themes


class ThemeService(Service):
    """Domain service for theme import and progress queries."""

    def __init__(
        self, theme_repository: ThemeRepository, vote_repository: VoteRepository
    ) -> None:
        """Initialize theme service.

        Args:
            theme_repository: Theme repository
            vote_repository: Vote repository
        """
        self.theme_repository = theme_repository
        self.vote_repository = vote_repository

    async def import_themes(self, lines: Iterable[str]) -> ImportSummary:
        """Create themes from import file lines, skipping existing content.

        Args:
            lines: Raw lines of a themes file

        Returns:
            Counts of loaded and skipped themes
        """
        summary = ImportSummary()
        with logfire.span("import_themes"):
            for content in parse_theme_lines(lines):
                if await self.theme_repository.find_by_content(content):
                    logfire.info("Skipped duplicate theme", content=content)
                    summary.skipped += 1
                    continue

                theme = await self.theme_repository.create(content)
                logfire.info("Loaded theme", theme_id=theme.id, content=content)
                summary.loaded += 1

            logfire.info(
                "Theme import finished",
                loaded=summary.loaded,
                skipped=summary.skipped,
            )
        return summary

    async def next_theme_for_user(self, user_id: UserId) -> ThemeProgress:
        """Pick a theme the user has not voted on yet.

        Args:
            user_id: The user's ID

        Returns:
            A random unvoted theme (None when all are done) and progress counts

        Raises:
            StorageUnavailableError: If storage cannot be reached
        """
        try:
            total = await self.theme_repository.count()
            seen = await self.vote_repository.count_by_user(user_id)
            theme = await self.theme_repository.pick_unvoted(user_id)
        except STORAGE_UNAVAILABLE_ERRORS as e:
            logfire.error("Theme storage unavailable", error=str(e))
            raise StorageUnavailableError("Theme storage is unavailable") from e

        return ThemeProgress(theme=theme, total=total, seen=seen)

    async def is_storage_available(self) -> bool:
        """Probe storage with a cheap query."""
        try:
            await self.theme_repository.count()
        except STORAGE_UNAVAILABLE_ERRORS as e:
            logfire.warn("Storage health check failed", error=str(e))
            return False
        return True
