"""Identity endpoints."""

from fastapi import APIRouter, Depends

from intellichat.dependencies import get_current_user
from intellichat.schemas.auth_schema import IdentityUser

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=IdentityUser, response_model_by_alias=True)
async def me(current_user: IdentityUser = Depends(get_current_user)) -> IdentityUser:
    """Return the signed-in user as issued by the identity provider."""
    return current_user
