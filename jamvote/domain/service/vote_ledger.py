"""Vote ledger domain service."""

import logfire
from sqlalchemy.exc import IntegrityError

from jamvote.domain.error import (
    DuplicateVoteError,
    InvalidVoteKindError,
    StorageUnavailableError,
    ThemeNotFoundError,
)
from jamvote.domain.model import Theme, ThemeTally, Vote
from jamvote.domain.repository import ThemeRepository, VoteRepository
from jamvote.domain.value import ThemeId, UserId, VoteType, is_valid_serial_id

from .base import (
    FOREIGN_KEY_VIOLATION,
    STORAGE_UNAVAILABLE_ERRORS,
    UNIQUE_VIOLATION,
    Service,
    violation_sqlstate,
)


def parse_vote_kind(value: object) -> VoteType:
    """Convert a wire value into a VoteType.

    Raises:
        InvalidVoteKindError: If the value is not yes, no or skip
    """
    if isinstance(value, VoteType):
        return value
    try:
        return VoteType(value)
    except ValueError:
        raise InvalidVoteKindError(value)


class VoteLedger(Service):
    """Domain service owning vote writes.

    The (user, theme) uniqueness constraint in storage is the only duplicate
    check: the ledger inserts and interprets the constraint violation, so
    concurrent submissions cannot both succeed.
    """

    def __init__(
        self, theme_repository: ThemeRepository, vote_repository: VoteRepository
    ) -> None:
        """Initialize vote ledger.

        Args:
            theme_repository: Theme repository
            vote_repository: Vote repository
        """
        self.theme_repository = theme_repository
        self.vote_repository = vote_repository

    async def record_vote(
        self, user_id: UserId, theme_id: ThemeId, vote_kind: object
    ) -> Vote:
        """Record a single vote.

        Args:
            user_id: Voting user
            theme_id: Theme voted on
            vote_kind: "yes", "no" or "skip"

        Returns:
            The persisted vote with its id and timestamp

        Raises:
            InvalidVoteKindError: If vote_kind is not recognized
            ThemeNotFoundError: If the theme does not exist
            DuplicateVoteError: If the user already voted on the theme
            StorageUnavailableError: If storage cannot be reached
        """
        with logfire.span("record_vote", user_id=user_id, theme_id=theme_id):
            vote_type = parse_vote_kind(vote_kind)

            # Ids outside the serial range would be rejected by the driver
            # before reaching the database
            if not is_valid_serial_id(theme_id):
                logfire.warn("Vote on out-of-range theme id", theme_id=theme_id)
                raise ThemeNotFoundError(theme_id)

            try:
                # Themes are never deleted, so this lookup cannot go stale
                theme = await self.theme_repository.find_by_id(theme_id)
                if theme is None:
                    logfire.warn("Vote on non-existent theme", theme_id=theme_id)
                    raise ThemeNotFoundError(theme_id)

                vote = await self.vote_repository.create(user_id, theme_id, vote_type)
            except IntegrityError as e:
                sqlstate = violation_sqlstate(e)
                if sqlstate == FOREIGN_KEY_VIOLATION:
                    logfire.warn("Vote on non-existent theme", theme_id=theme_id)
                    raise ThemeNotFoundError(theme_id) from e
                if sqlstate == UNIQUE_VIOLATION:
                    logfire.warn(
                        "Duplicate vote attempt", user_id=user_id, theme_id=theme_id
                    )
                    raise DuplicateVoteError(user_id, theme_id) from e
                logfire.error(
                    "Unexpected constraint violation", sqlstate=sqlstate, error=str(e)
                )
                raise
            except STORAGE_UNAVAILABLE_ERRORS as e:
                logfire.error("Vote storage unavailable", error=str(e))
                raise StorageUnavailableError("Vote storage is unavailable") from e

            logfire.info(
                "Vote recorded",
                vote_id=vote.id,
                user_id=user_id,
                theme_id=theme_id,
                vote_type=vote_type.value,
            )
            return vote

    async def list_themes(self) -> list[Theme]:
        """Return all themes in creation order.

        Raises:
            StorageUnavailableError: If storage cannot be reached
        """
        try:
            return await self.theme_repository.find_all()
        except STORAGE_UNAVAILABLE_ERRORS as e:
            logfire.error("Theme storage unavailable", error=str(e))
            raise StorageUnavailableError("Theme storage is unavailable") from e

    async def tally_votes(self) -> list[ThemeTally]:
        """Count yes, no and skip votes for every theme.

        Returns:
            One tally per theme, most yes votes first, ties by theme id

        Raises:
            StorageUnavailableError: If storage cannot be reached
        """
        with logfire.span("tally_votes"):
            try:
                tallies = await self.vote_repository.tally_by_theme()
            except STORAGE_UNAVAILABLE_ERRORS as e:
                logfire.error("Vote storage unavailable", error=str(e))
                raise StorageUnavailableError("Vote storage is unavailable") from e

            logfire.info("Votes tallied", themes=len(tallies))
            return tallies
