from typing import Any, Dict

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from marquee.core.auth import get_token_claims
from marquee.core.container import ServiceContainer, UserWorkspace
from marquee.core.exceptions import BaseAppException
from marquee.core.session import SessionUser
from marquee.db import get_db
from marquee.routers.common import handle_exception
from marquee.services.catalog_service import MovieCatalogService
from marquee.services.discovery_service import DiscoveryService
from marquee.services.user_service import UserService
from marquee.services.watchlist_store import WatchlistStore

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container

def get_catalog(container: ServiceContainer = Depends(get_container)) -> MovieCatalogService:
    return container.catalog

def get_discovery(container: ServiceContainer = Depends(get_container)) -> DiscoveryService:
    return container.discovery

def get_active_claims(
    claims: Dict[str, Any] = Depends(get_token_claims),
    container: ServiceContainer = Depends(get_container),
) -> Dict[str, Any]:
    """Claims of a bearer token that has not been revoked by logout"""
    if container.token_denylist.is_revoked(claims.get("jti")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims

def get_session_user(
    claims: Dict[str, Any] = Depends(get_active_claims),
    db: Session = Depends(get_db),
) -> SessionUser:
    """Signed-in identity behind the bearer token"""
    user = UserService(db).get_user_by_id(claims["sub"])
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return SessionUser(id=user.id, email=user.email, username=user.username)

def get_workspace(
    user: SessionUser = Depends(get_session_user),
    container: ServiceContainer = Depends(get_container),
) -> UserWorkspace:
    return container.open_workspace(user)

def get_watchlist_store(workspace: UserWorkspace = Depends(get_workspace)) -> WatchlistStore:
    """The user's store, reloaded first if its last load failed"""
    try:
        workspace.watchlist.ensure_loaded()
    except BaseAppException as e:
        raise handle_exception(e)
    return workspace.watchlist
