"""Bearer authentication for API routes."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jamvote.domain.service import IdentityService
from jamvote.domain.value import UserId

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> UserId:
    """Resolve the caller's user ID from the Authorization header.

    Raises:
        HTTPException: 401 if the credential is missing or rejected
        IdentityProviderUnavailableError: If the provider cannot be reached
    """
    identity_service = await request.state.dishka_container.get(IdentityService)

    token = credentials.credentials if credentials else None
    user_id = await identity_service.get_user_id_from_token(token)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
