# storefront/routers/profile.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import profile_service, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.profile import ProfileRead, ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/profile", response_model=ProfileResponse)
def read_profile(current_user: User = Depends(require_auth)):
    """
    Return the signed-in shopper's profile.
    """
    return ProfileResponse(user=ProfileRead.model_validate(current_user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    user = profile_service.update_profile(session, current_user, payload)
    return ProfileResponse(user=ProfileRead.model_validate(user))
