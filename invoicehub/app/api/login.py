"""Login endpoint for InvoiceHub users."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from invoicehub.app.core.security import create_access_token, verify_password
from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.user import User
from invoicehub.app.schemas.login import LoginRequest, TokenResponse
from invoicehub.app.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not user.hashed_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")
    if not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    token = create_access_token(user_id=user.id)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
