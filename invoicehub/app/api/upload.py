"""Business logo upload and removal."""

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from invoicehub.app.core.errors import UpstreamFailureError
from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.user import User
from invoicehub.app.services.logo_storage import (
    LogoValidationError,
    delete_logo,
    extract_key_from_url,
    upload_logo,
    validate_logo,
)

LOGGER = structlog.get_logger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


def _remove_stored_logo(logo_url: str) -> None:
    key = extract_key_from_url(logo_url)
    if key:
        delete_logo(key)


@router.post("/logo")
async def upload_business_logo(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    content = await file.read()
    try:
        validate_logo(content, file.content_type)
    except LogoValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    # The previous logo stays in place until the new one is stored and saved
    previous_url = current_user.logo_url
    stored = upload_logo(current_user.id, content, file.content_type, file.filename)
    current_user.logo_url = stored.url
    db.commit()

    if previous_url:
        try:
            _remove_stored_logo(previous_url)
        except UpstreamFailureError:
            LOGGER.warning("previous_logo_not_removed", user_id=current_user.id, url=previous_url)
    return {"success": True, "url": stored.url, "message": "Logo uploaded successfully"}


@router.delete("/logo")
async def delete_business_logo(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not current_user.logo_url:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No logo to delete")

    _remove_stored_logo(current_user.logo_url)
    current_user.logo_url = None
    db.commit()
    LOGGER.info("logo_deleted", user_id=current_user.id)
    return {"success": True, "message": "Logo deleted successfully"}
