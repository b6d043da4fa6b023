"""Theme routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from jamvote.application.usecase.theme import (
    GetNextThemeRequest,
    GetNextThemeResponse,
    GetNextThemeUseCase,
    GetThemeResultsUseCase,
    ListThemesUseCase,
    ThemeItem,
    ThemeResultItem,
)
from jamvote.domain.value import UserId
from jamvote.interface.api.auth import get_current_user_id

router = APIRouter(prefix="/themes", tags=["themes"], route_class=DishkaRoute)


@router.get("", response_model=list[ThemeItem])
async def list_themes(
    list_themes_use_case: FromDishka[ListThemesUseCase],
    user_id: UserId = Depends(get_current_user_id),
) -> list[ThemeItem]:
    """List every theme open for voting, oldest first.

    Requires authentication.
    """
    response = await list_themes_use_case.execute()
    return response.themes


@router.get("/next", response_model=GetNextThemeResponse)
async def get_next_theme(
    get_next_theme_use_case: FromDishka[GetNextThemeUseCase],
    user_id: UserId = Depends(get_current_user_id),
) -> GetNextThemeResponse:
    """Pick a random theme the caller has not voted on yet.

    Requires authentication.

    Returns:
        The theme (null when every theme has been voted on) and progress counts
    """
    return await get_next_theme_use_case.execute(GetNextThemeRequest(user_id=user_id))


@router.get("/results", response_model=list[ThemeResultItem])
async def get_theme_results(
    get_theme_results_use_case: FromDishka[GetThemeResultsUseCase],
    user_id: UserId = Depends(get_current_user_id),
) -> list[ThemeResultItem]:
    """Vote counts per theme, most yes votes first.

    Requires authentication.
    """
    response = await get_theme_results_use_case.execute()
    return response.results
