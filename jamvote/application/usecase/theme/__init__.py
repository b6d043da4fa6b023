"""Theme use cases."""

from .get_next_theme import (
    GetNextThemeRequest,
    GetNextThemeResponse,
    GetNextThemeUseCase,
)
from .get_results import (
    GetThemeResultsRequest,
    GetThemeResultsResponse,
    GetThemeResultsUseCase,
    ThemeResultItem,
)
from .import_themes import (
    ImportThemesRequest,
    ImportThemesResponse,
    ImportThemesUseCase,
)
from .list_themes import (
    ListThemesRequest,
    ListThemesResponse,
    ListThemesUseCase,
    ThemeItem,
)

__all__ = [
    "GetNextThemeRequest",
    "GetNextThemeResponse",
    "GetNextThemeUseCase",
    "GetThemeResultsRequest",
    "GetThemeResultsResponse",
    "GetThemeResultsUseCase",
    "ImportThemesRequest",
    "ImportThemesResponse",
    "ImportThemesUseCase",
    "ListThemesRequest",
    "ListThemesResponse",
    "ListThemesUseCase",
    "ThemeItem",
    "ThemeResultItem",
]
