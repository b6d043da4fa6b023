"""Domain layer DI providers."""

from dishka import Scope, provide

from jamvote.domain.repository import ThemeRepository, VoteRepository
from jamvote.domain.service import (
    IdentityResolver,
    IdentityService,
    ThemeService,
    VoteLedger,
)
from jamvote.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_vote_ledger(
        self, theme_repository: ThemeRepository, vote_repository: VoteRepository
    ) -> VoteLedger:
        """Provide vote ledger domain service."""
        return VoteLedger(
            theme_repository=theme_repository, vote_repository=vote_repository
        )

    @provide
    def get_theme_service(
        self, theme_repository: ThemeRepository, vote_repository: VoteRepository
    ) -> ThemeService:
        """Provide theme domain service."""
        return ThemeService(
            theme_repository=theme_repository, vote_repository=vote_repository
        )

    @provide
    def get_identity_service(
        self, identity_resolver: IdentityResolver
    ) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(identity_resolver=identity_resolver)
