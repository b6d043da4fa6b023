"""Vote routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from jamvote.application.usecase.vote import (
    SubmitVoteRequest,
    SubmitVoteResponse,
    SubmitVoteUseCase,
)
from jamvote.domain.error import (
    DuplicateVoteError,
    InvalidVoteKindError,
    ThemeNotFoundError,
)
from jamvote.domain.value import UserId
from jamvote.interface.api.auth import get_current_user_id

router = APIRouter(tags=["votes"], route_class=DishkaRoute)


class VoteBody(BaseModel):
    """Vote submission body."""

    theme_id: int
    vote_type: str


@router.post(
    "/votes",
    response_model=SubmitVoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_vote(
    body: VoteBody,
    submit_vote_use_case: FromDishka[SubmitVoteUseCase],
    user_id: UserId = Depends(get_current_user_id),
) -> SubmitVoteResponse:
    """Cast a yes/no/skip vote on a theme.

    Requires authentication. A user votes on each theme at most once.

    Args:
        body: Theme ID and vote type
        submit_vote_use_case: Submit vote use case from DI
        user_id: Authenticated caller

    Returns:
        ID and timestamp of the recorded vote

    Raises:
        HTTPException: 400 invalid vote type, 404 unknown theme, 409 already voted
    """
    try:
        request = SubmitVoteRequest(
            user_id=user_id, theme_id=body.theme_id, vote_type=body.vote_type
        )
        return await submit_vote_use_case.execute(request)
    except InvalidVoteKindError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ThemeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateVoteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
