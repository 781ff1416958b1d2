"""Analytics endpoints for the signed-in user's invoices."""

from typing import Literal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.user import User
from invoicehub.app.services.analytics import get_dashboard_summary, get_enhanced_analytics
from invoicehub.app.services.periods import DEFAULT_PERIOD

router = APIRouter(prefix="/analytics", tags=["analytics"])

Period = Literal["7days", "30days", "3months", "6months", "12months", "24months"]


@router.get("/")
async def read_analytics(
    period: Period = DEFAULT_PERIOD,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_enhanced_analytics(db, owner_id=current_user.id, period=period)


@router.get("/summary")
async def read_dashboard_summary(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_dashboard_summary(db, owner_id=current_user.id)
