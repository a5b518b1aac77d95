from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from familybudget import models
from familybudget.core.database import get_db
from familybudget.core.deps import get_current_user
from familybudget.schemas import AuthOut, LoginRequest, MessageOut, RegisterRequest, UserOut
from familybudget.services import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user, token = AuthService(db).register(payload)
    return AuthOut(message="User registered successfully", token=token, user=UserOut.model_validate(user))


@router.post("/login", response_model=AuthOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, token = AuthService(db).login(payload)
    return AuthOut(message="Login successful", token=token, user=UserOut.model_validate(user))


@router.post("/logout", response_model=MessageOut)
def logout(current_user: models.User = Depends(get_current_user)):
    # Tokens are stateless; the client drops its copy
    return MessageOut(message="Logout successful")


@router.get("/profile", response_model=UserOut)
def profile(current_user: models.User = Depends(get_current_user)):
    return current_user
