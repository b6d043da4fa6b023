"""Unit tests for VoteLedger."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from jamvote.domain.error import (
    DuplicateVoteError,
    InvalidVoteKindError,
    StorageUnavailableError,
    ThemeNotFoundError,
)
from jamvote.domain.repository import ThemeRepository, VoteRepository
from jamvote.domain.service import VoteLedger, parse_vote_kind
from jamvote.domain.value import MAX_SERIAL_ID, ThemeId, UserId, VoteType
from jamvote.persistence.repository.inmemory.store import (
    ConstraintViolation,
    integrity_error,
)
from tests.conftest import seed_themes
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestParseVoteKind:
    """Tests for vote kind parsing."""

    @pytest.mark.parametrize("value", ["yes", "no", "skip"])
    def test_accepts_known_kinds(self, value):
        assert parse_vote_kind(value) == VoteType(value)

    @pytest.mark.parametrize("value", ["maybe", "YES", "", None, 1])
    def test_rejects_anything_else(self, value):
        with pytest.raises(InvalidVoteKindError):
            parse_vote_kind(value)


class TestRecordVote:
    """Tests for record_vote."""

    @pytest.mark.asyncio
    async def test_records_vote_with_id_and_timestamp(self, unit_env):
        """A first vote on an existing theme is persisted."""
        # Arrange
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        vote_repo = await unit_env.get(VoteRepository)
        [theme] = await seed_themes(theme_repo, "Only one")

        # Act
        vote = await ledger.record_vote(UserId("alice"), theme.id, "yes")

        # Assert
        assert vote.id is not None
        assert vote.created_at is not None
        assert vote.vote_type == VoteType.YES
        stored = await vote_repo.find_by_user_and_theme(UserId("alice"), theme.id)
        assert stored == vote

    @pytest.mark.asyncio
    async def test_second_vote_by_same_user_is_duplicate(self, unit_env):
        """Votes are never changed: a second vote conflicts, even with another kind."""
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        vote_repo = await unit_env.get(VoteRepository)
        [theme] = await seed_themes(theme_repo, "Only one")

        first = await ledger.record_vote(UserId("alice"), theme.id, "yes")

        with pytest.raises(DuplicateVoteError) as exc_info:
            await ledger.record_vote(UserId("alice"), theme.id, "no")

        assert exc_info.value.retryable is False
        stored = await vote_repo.find_by_user_and_theme(UserId("alice"), theme.id)
        assert stored == first
        assert stored.vote_type == VoteType.YES

    @pytest.mark.asyncio
    async def test_different_users_vote_independently(self, unit_env):
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        [theme] = await seed_themes(theme_repo, "Only one")

        await ledger.record_vote(UserId("alice"), theme.id, "yes")
        vote = await ledger.record_vote(UserId("bob"), theme.id, "skip")

        assert vote.vote_type == VoteType.SKIP

    @pytest.mark.asyncio
    async def test_unknown_theme_is_not_found(self, unit_env):
        ledger = await unit_env.get(VoteLedger)
        vote_repo = await unit_env.get(VoteRepository)

        with pytest.raises(ThemeNotFoundError) as exc_info:
            await ledger.record_vote(UserId("alice"), ThemeId(999), "yes")

        assert exc_info.value.theme_id == 999
        assert await vote_repo.find_by_user(UserId("alice")) == []

    @pytest.mark.asyncio
    async def test_invalid_kind_is_rejected_before_anything_else(self, unit_env):
        """An invalid kind wins even when the theme does not exist."""
        ledger = await unit_env.get(VoteLedger)

        with pytest.raises(InvalidVoteKindError):
            await ledger.record_vote(UserId("alice"), ThemeId(999), "maybe")

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_yield_exactly_one_vote(self, unit_env):
        """Racing submissions for one (user, theme): one wins, the rest conflict."""
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        vote_repo = await unit_env.get(VoteRepository)
        [theme] = await seed_themes(theme_repo, "Contested")

        results = await asyncio.gather(
            *(
                ledger.record_vote(UserId("alice"), theme.id, kind)
                for kind in ["yes", "no", "skip", "yes", "no"]
            ),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, DuplicateVoteError)]
        assert len(successes) == 1
        assert len(conflicts) == 4
        assert len(await vote_repo.find_by_user(UserId("alice"))) == 1

    @pytest.mark.asyncio
    async def test_storage_outage_is_retryable(self):
        """Connection failures surface as StorageUnavailableError."""
        theme_repo = AsyncMock(spec=ThemeRepository)
        theme_repo.find_by_id.side_effect = OperationalError(
            "SELECT", None, ConnectionRefusedError("connection refused")
        )
        ledger = VoteLedger(
            theme_repository=theme_repo, vote_repository=AsyncMock(spec=VoteRepository)
        )

        with pytest.raises(StorageUnavailableError) as exc_info:
            await ledger.record_vote(UserId("alice"), ThemeId(1), "yes")

        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("theme_id", [MAX_SERIAL_ID + 1, 2**63, 0, -1])
    async def test_theme_id_outside_serial_range_is_not_found(self, theme_id):
        """Such ids cannot exist, and the driver would reject them as arguments."""
        theme_repo = AsyncMock(spec=ThemeRepository)
        theme_repo.find_by_id.side_effect = InterfaceError(
            "SELECT", None, OverflowError("value out of int32 range")
        )
        vote_repo = AsyncMock(spec=VoteRepository)
        ledger = VoteLedger(theme_repository=theme_repo, vote_repository=vote_repo)

        with pytest.raises(ThemeNotFoundError) as exc_info:
            await ledger.record_vote(UserId("alice"), ThemeId(theme_id), "yes")

        assert exc_info.value.retryable is False
        theme_repo.find_by_id.assert_not_awaited()
        vote_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_largest_serial_id_is_looked_up(self):
        theme_repo = AsyncMock(spec=ThemeRepository)
        theme_repo.find_by_id.return_value = None
        ledger = VoteLedger(
            theme_repository=theme_repo, vote_repository=AsyncMock(spec=VoteRepository)
        )

        with pytest.raises(ThemeNotFoundError):
            await ledger.record_vote(UserId("alice"), ThemeId(MAX_SERIAL_ID), "yes")

        theme_repo.find_by_id.assert_awaited_once_with(MAX_SERIAL_ID)


class TestConstraintViolations:
    """Insert failures are told apart by SQLSTATE, not by message text."""

    @staticmethod
    def ledger_whose_insert_fails(error: IntegrityError) -> VoteLedger:
        theme_repo = AsyncMock(spec=ThemeRepository)
        theme_repo.find_by_id.return_value = object()
        vote_repo = AsyncMock(spec=VoteRepository)
        vote_repo.create.side_effect = error
        return VoteLedger(theme_repository=theme_repo, vote_repository=vote_repo)

    @pytest.mark.asyncio
    async def test_unique_violation_is_duplicate(self):
        ledger = self.ledger_whose_insert_fails(
            integrity_error("INSERT", "23505", "unique_vote_per_user_theme")
        )

        with pytest.raises(DuplicateVoteError):
            await ledger.record_vote(UserId("alice"), ThemeId(1), "yes")

    @pytest.mark.asyncio
    async def test_foreign_key_violation_is_not_found(self):
        ledger = self.ledger_whose_insert_fails(
            integrity_error("INSERT", "23503", "votes_theme_id_fkey")
        )

        with pytest.raises(ThemeNotFoundError):
            await ledger.record_vote(UserId("alice"), ThemeId(1), "yes")

    @pytest.mark.asyncio
    async def test_sqlstate_is_read_from_the_driver_cause(self):
        """Adapted DBAPI errors keep the driver error as __cause__."""
        adapted = Exception("insert or update on table violates foreign key")
        adapted.__cause__ = ConstraintViolation("23503", "votes_theme_id_fkey")
        ledger = self.ledger_whose_insert_fails(
            IntegrityError("INSERT", None, adapted)
        )

        with pytest.raises(ThemeNotFoundError):
            await ledger.record_vote(UserId("alice"), ThemeId(1), "yes")

    @pytest.mark.asyncio
    async def test_other_violations_are_not_reported_as_duplicates(self):
        error = integrity_error("INSERT", "23514", "votes_vote_type_check")
        ledger = self.ledger_whose_insert_fails(error)

        with pytest.raises(IntegrityError) as exc_info:
            await ledger.record_vote(UserId("alice"), ThemeId(1), "yes")

        assert exc_info.value is error


class TestListThemes:
    """Tests for list_themes."""

    @pytest.mark.asyncio
    async def test_lists_in_creation_order(self, unit_env):
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        await seed_themes(theme_repo, "First", "Second", "Third")

        themes = await ledger.list_themes()

        assert [t.content for t in themes] == ["First", "Second", "Third"]
        assert [t.id for t in themes] == sorted(t.id for t in themes)

    @pytest.mark.asyncio
    async def test_empty_when_no_themes(self, unit_env):
        ledger = await unit_env.get(VoteLedger)

        assert await ledger.list_themes() == []

    @pytest.mark.asyncio
    async def test_storage_outage(self):
        theme_repo = AsyncMock(spec=ThemeRepository)
        theme_repo.find_all.side_effect = ConnectionResetError()
        ledger = VoteLedger(
            theme_repository=theme_repo, vote_repository=AsyncMock(spec=VoteRepository)
        )

        with pytest.raises(StorageUnavailableError):
            await ledger.list_themes()


class TestTallyVotes:
    """Tests for tally_votes."""

    @pytest.mark.asyncio
    async def test_counts_each_kind_most_yes_first(self, unit_env):
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        roots, loops, echoes = await seed_themes(theme_repo, "Roots", "Loops", "Echoes")

        await ledger.record_vote(UserId("alice"), roots.id, "no")
        await ledger.record_vote(UserId("alice"), loops.id, "yes")
        await ledger.record_vote(UserId("bob"), loops.id, "yes")
        await ledger.record_vote(UserId("bob"), roots.id, "skip")

        tallies = await ledger.tally_votes()

        assert [t.theme_id for t in tallies] == [loops.id, roots.id, echoes.id]
        by_theme = {t.theme_id: t for t in tallies}
        assert (by_theme[loops.id].yes_votes, by_theme[loops.id].total_votes) == (2, 2)
        assert (
            by_theme[roots.id].yes_votes,
            by_theme[roots.id].no_votes,
            by_theme[roots.id].skip_votes,
            by_theme[roots.id].total_votes,
        ) == (0, 1, 1, 2)
        assert by_theme[echoes.id].total_votes == 0

    @pytest.mark.asyncio
    async def test_ties_are_ordered_by_theme_id(self, unit_env):
        ledger = await unit_env.get(VoteLedger)
        theme_repo = await unit_env.get(ThemeRepository)
        first, second = await seed_themes(theme_repo, "First", "Second")

        await ledger.record_vote(UserId("alice"), second.id, "yes")
        await ledger.record_vote(UserId("alice"), first.id, "yes")

        tallies = await ledger.tally_votes()

        assert [t.theme_id for t in tallies] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_storage_outage(self):
        vote_repo = AsyncMock(spec=VoteRepository)
        vote_repo.tally_by_theme.side_effect = OperationalError(
            "SELECT", None, ConnectionRefusedError("connection refused")
        )
        ledger = VoteLedger(
            theme_repository=AsyncMock(spec=ThemeRepository), vote_repository=vote_repo
        )

        with pytest.raises(StorageUnavailableError):
            await ledger.tally_votes()
