"""Application layer DI providers."""

from dishka import Scope, provide

from jamvote.application.usecase.theme import (
    GetNextThemeUseCase,
    GetThemeResultsUseCase,
    ImportThemesUseCase,
    ListThemesUseCase,
)
from jamvote.application.usecase.vote import SubmitVoteUseCase
from jamvote.domain.service import ThemeService, VoteLedger
from jamvote.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_submit_vote_use_case(self, vote_ledger: VoteLedger) -> SubmitVoteUseCase:
        """Provide submit vote use case."""
        return SubmitVoteUseCase(vote_ledger=vote_ledger)

    # Theme use cases
    @provide(scope=Scope.REQUEST)
    def get_list_themes_use_case(self, vote_ledger: VoteLedger) -> ListThemesUseCase:
        """Provide list themes use case."""
        return ListThemesUseCase(vote_ledger=vote_ledger)

    @provide(scope=Scope.REQUEST)
    def get_get_next_theme_use_case(
        self, theme_service: ThemeService
    ) -> GetNextThemeUseCase:
        """Provide get next theme use case."""
        return GetNextThemeUseCase(theme_service=theme_service)

    @provide(scope=Scope.REQUEST)
    def get_theme_results_use_case(
        self, vote_ledger: VoteLedger
    ) -> GetThemeResultsUseCase:
        """Provide theme results use case."""
        return GetThemeResultsUseCase(vote_ledger=vote_ledger)

    @provide(scope=Scope.REQUEST)
    def get_import_themes_use_case(
        self, theme_service: ThemeService
    ) -> ImportThemesUseCase:
        """Provide import themes use case."""
        return ImportThemesUseCase(theme_service=theme_service)
