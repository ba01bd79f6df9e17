import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from marquee.core.auth import TokenDenylist
from marquee.core.cache import CacheService
from marquee.core.config import Settings, get_settings
from marquee.core.interfaces import TMDBClientInterface, TMDBConfig
from marquee.core.session import SessionProvider, SessionUser
from marquee.core.tmdb_client import TMDBClient
from marquee.services.booking_wizard import BookingWizard
from marquee.services.catalog_service import MovieCatalogService
from marquee.services.discovery_service import DiscoveryService
from marquee.services.reservation import LoggingReservationService, ReservationService
from marquee.services.watchlist_store import WatchlistStore

logger = logging.getLogger(__name__)


@dataclass
class UserWorkspace:
    """Per-user services that live from sign-in to sign-out"""
    session: SessionProvider
    watchlist: WatchlistStore


class ServiceContainer:
    """Services built once at startup and handed to routers via ``Depends``.

    Catalog, discovery and reservation services are shared. Each signed-in
    user gets a ``UserWorkspace`` opened on login (or on the first
    authenticated request) and torn down on logout, or once it has been idle
    for ``WORKSPACE_IDLE_MINUTES``.
    """

    def __init__(
        self,
        db_factory: Callable[[], Session],
        catalog: MovieCatalogService,
        reservation_service: Optional[ReservationService] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or get_settings()
        self.db_factory = db_factory
        self.catalog = catalog
        self.discovery = DiscoveryService(catalog)
        self.reservation_service = reservation_service or LoggingReservationService()
        self.token_denylist = TokenDenylist()
        self.idle_timeout = self.settings.WORKSPACE_IDLE_MINUTES * 60
        self._clock = clock
        self._workspaces: Dict[int, UserWorkspace] = {}
        self._last_seen: Dict[int, float] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        db_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
        client: Optional[TMDBClientInterface] = None,
    ) -> "ServiceContainer":
        settings = settings or get_settings()
        if client is None:
            client = TMDBClient(TMDBConfig(
                api_key=settings.TMDB_API_KEY,
                base_url=settings.TMDB_BASE_URL,
                language=settings.TMDB_LANGUAGE,
                timeout=settings.TMDB_TIMEOUT,
            ))
        cache = CacheService(settings.REDIS_URL) if settings.CACHE_ENABLED else None
        catalog = MovieCatalogService(client, cache=cache, cache_ttl=settings.CACHE_TTL_SECONDS)
        return cls(db_factory, catalog, settings=settings)

    def open_workspace(self, user: SessionUser) -> UserWorkspace:
        """Workspace for ``user``, signing them in on first use"""
        self.evict_idle()
        with self._lock:
            workspace = self._workspaces.get(user.id)
            if workspace is None:
                session = SessionProvider()
                workspace = UserWorkspace(session, WatchlistStore(session, self.db_factory))
                self._workspaces[user.id] = workspace
            self._last_seen[user.id] = self._clock()
        workspace.session.sign_in(user)
        return workspace

    def close_workspace(self, user_id: int) -> bool:
        with self._lock:
            workspace = self._workspaces.pop(user_id, None)
            self._last_seen.pop(user_id, None)
        if workspace is None:
            return False
        self._teardown(user_id, workspace)
        return True

    def end_session(self, user_id: int, jti: Optional[str], expires_at: float) -> None:
        """Logout: revoke the token and drop the user's workspace"""
        self.token_denylist.revoke(jti, expires_at)
        self.close_workspace(user_id)

    def evict_idle(self) -> List[int]:
        """Close workspaces not used within ``idle_timeout``; returns their user ids"""
        cutoff = self._clock() - self.idle_timeout
        evicted = []
        with self._lock:
            for user_id, seen in list(self._last_seen.items()):
                if seen < cutoff:
                    evicted.append((user_id, self._workspaces.pop(user_id, None)))
                    del self._last_seen[user_id]
        for user_id, workspace in evicted:
            if workspace is not None:
                logger.info(f"Evicting idle workspace for user {user_id}")
                self._teardown(user_id, workspace)
        return [user_id for user_id, _ in evicted]

    def _teardown(self, user_id: int, workspace: UserWorkspace) -> None:
        workspace.session.sign_out()
        workspace.watchlist.close()
        logger.info(f"Closed workspace for user {user_id}")

    def has_workspace(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._workspaces

    def new_booking(self, movie_id: int, movie_title: str, user_id: Optional[int] = None) -> BookingWizard:
        return BookingWizard(
            movie_id,
            movie_title,
            reservation_service=self.reservation_service,
            user_id=user_id,
            ticket_price=self.settings.TICKET_PRICE,
            cab_fee=self.settings.CAB_FEE,
            max_seats=self.settings.MAX_SEATS,
        )

    def shutdown(self) -> None:
        with self._lock:
            user_ids = list(self._workspaces)
        for user_id in user_ids:
            self.close_workspace(user_id)
