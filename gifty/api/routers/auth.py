from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, get_current_user
from gifty.data.database import get_db
from gifty.domain.errors import AuthenticationError, NotFoundError
from gifty.domain.schemas import (
    AuthOut,
    ForgotPasswordIn,
    LoginIn,
    MessageOut,
    RegisterIn,
    ResetPasswordIn,
    ResetTokenOut,
    UserOut,
)
from gifty.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        user, token = service.register(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Registered!", "token": token, "user": user}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        user, token = service.login(payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return {"message": "Login successful!", "token": token, "user": user}


@router.get("/me", response_model=UserOut)
def me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.get_user(user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/forgot-password", response_model=ResetTokenOut)
def forgot_password(payload: ForgotPasswordIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        reset_token = service.forgot_password(payload.email)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Reset token generated", "reset_token": reset_token}


@router.post("/reset-password", response_model=MessageOut)
def reset_password(payload: ResetPasswordIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        service.reset_password(payload.reset_token, payload.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Password reset successful"}
