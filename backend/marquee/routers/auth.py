from datetime import timedelta
from typing import Any, Dict
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from marquee.db import get_db
from marquee.schemas.user import UserCreate, UserLogin, UserResponse, Token
from marquee.services.user_service import UserService
from marquee.core.auth import create_access_token
from marquee.core.config import get_settings
from marquee.core.container import ServiceContainer
from marquee.core.exceptions import UserNotFoundException
from marquee.core.session import SessionUser
from marquee.routers.common import handle_exception
from marquee.routers.dependencies import get_active_claims, get_container

router = APIRouter(prefix="/auth", tags=["authentication"])

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user"""
    try:
        return UserService(db).create_user(user_data)
    except Exception as e:
        raise handle_exception(e)

@router.post("/login", response_model=Token)
def login(
    user_credentials: UserLogin,
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
):
    """Login user, open their workspace and return an access token"""
    try:
        user = UserService(db).authenticate_user(user_credentials.email, user_credentials.password)

        settings = get_settings()
        access_token = create_access_token(
            data={"sub": str(user.id)},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        container.open_workspace(SessionUser(id=user.id, email=user.email, username=user.username))
        return {"access_token": access_token, "token_type": "bearer"}
    except Exception as e:
        raise handle_exception(e)

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    claims: Dict[str, Any] = Depends(get_active_claims),
    container: ServiceContainer = Depends(get_container),
):
    """Sign out: the token is revoked and the user's watchlist state is dropped"""
    container.end_session(claims["sub"], claims.get("jti"), claims.get("exp", 0))

@router.get("/me", response_model=UserResponse)
def get_current_user_info(claims: Dict[str, Any] = Depends(get_active_claims), db: Session = Depends(get_db)):
    """Get current user information"""
    try:
        user = UserService(db).get_user_by_id(claims["sub"])
        if not user:
            raise UserNotFoundException()
        return user
    except Exception as e:
        raise handle_exception(e)
