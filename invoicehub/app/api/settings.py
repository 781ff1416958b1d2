"""Business profile and invoicing preferences for the signed-in user."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.user import User
from invoicehub.app.schemas.user import UserSettingsRead, UserSettingsUpdate

LOGGER = structlog.get_logger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/profile", response_model=UserSettingsRead)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserSettingsRead)
async def update_profile(
    profile: UserSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # The counter is never reset here; only the prefix of future numbers changes
    update_fields = profile.model_dump(exclude_unset=True)
    for field, value in update_fields.items():
        if value is not None:
            setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    LOGGER.info("profile_updated", user_id=current_user.id, fields=sorted(update_fields))
    return current_user
