import logging
import threading
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marquee.core.exceptions import BaseAppException, RemoteUnavailableException
from marquee.core.session import SessionProvider, SessionUser
from marquee.models.watchlist import WatchlistEntry
from marquee.repositories.watchlist_repository import WatchlistEntryRepository
from marquee.schemas.movie import Movie

logger = logging.getLogger(__name__)


def entry_to_movie(entry: WatchlistEntry) -> Movie:
    """Rebuild a Movie from its stored snapshot; unstored fields stay empty"""
    return Movie(
        id=entry.movie_id,
        title=entry.movie_title,
        poster_path=entry.poster_path or "",
        release_date=entry.release_date or "",
        vote_average=entry.vote_average or 0.0,
        overview="",
        genre_ids=[],
        backdrop_path="",
        adult=False,
    )


class WatchlistStore:
    """In-memory view of the signed-in user's watchlist, newest first.

    The ``watchlist_entries`` table is authoritative. Local state only changes
    after the database confirms a load, insert or delete, so ``is_saved``
    never reflects an in-flight mutation. The store follows its
    ``SessionProvider``: it empties on sign-out or user switch and reloads
    whenever a user signs in. A result that arrives after the user changed is
    dropped.
    """

    def __init__(self, session: SessionProvider, db_factory: Callable[[], Session]):
        self.session = session
        self._db_factory = db_factory
        self._movies: List[Movie] = []
        self._loads_in_flight = 0
        self._generation = 0
        self._lock = threading.RLock()
        self.last_error: Optional[BaseAppException] = None
        self._unsubscribe = session.subscribe(self._on_session_change)
        if session.current_user is not None:
            self._reload_quietly()

    @property
    def movies(self) -> List[Movie]:
        with self._lock:
            return list(self._movies)

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loads_in_flight > 0

    def is_saved(self, movie_id: int) -> bool:
        with self._lock:
            return any(movie.id == movie_id for movie in self._movies)

    def load(self) -> List[Movie]:
        """Replace local state with the user's rows; raises RemoteUnavailableException"""
        user = self.session.current_user
        if user is None:
            return []
        with self._lock:
            generation = self._generation
            self._loads_in_flight += 1
        try:
            with self._db_factory() as db:
                entries = WatchlistEntryRepository(db).list_for_user(user.id)
                movies = [entry_to_movie(entry) for entry in entries]
        except SQLAlchemyError as e:
            logger.error(f"Error loading watchlist for user {user.id}: {str(e)}")
            error = RemoteUnavailableException("Failed to load watchlist")
            with self._lock:
                if generation == self._generation:
                    self.last_error = error
            raise error from e
        finally:
            with self._lock:
                self._loads_in_flight -= 1

        with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding watchlist load for user {user.id}: session changed")
                return list(self._movies)
            self._movies = movies
            self.last_error = None
            return list(self._movies)

    def ensure_loaded(self) -> List[Movie]:
        """Retry a load that failed earlier; raises RemoteUnavailableException while it keeps failing"""
        if self.last_error is not None:
            return self.load()
        return self.movies

    def add(self, movie: Movie) -> bool:
        """Save ``movie`` for the current user.

        Returns False without a signed-in user. Raises
        WatchlistEntryExistsException for a duplicate and
        RemoteUnavailableException when the database fails; local state is
        untouched in both cases.
        """
        user = self.session.current_user
        if user is None:
            logger.debug(f"Ignoring watchlist add of {movie.id}: no signed-in user")
            return False
        generation = self._generation
        try:
            with self._db_factory() as db:
                WatchlistEntryRepository(db).add_entry(user.id, movie)
        except SQLAlchemyError as e:
            logger.error(f"Error adding movie {movie.id} to watchlist: {str(e)}")
            raise RemoteUnavailableException("Failed to update watchlist") from e

        with self._lock:
            if not self._still_current(generation, user):
                return False
            self._movies = [movie] + [m for m in self._movies if m.id != movie.id]
        logger.info(f"User {user.id} saved movie {movie.id}")
        return True

    def remove(self, movie_id: int) -> bool:
        """Delete ``movie_id`` for the current user; True if a row was removed.

        Removing a movie that is not saved changes nothing and is not an error.
        """
        user = self.session.current_user
        if user is None:
            logger.debug(f"Ignoring watchlist remove of {movie_id}: no signed-in user")
            return False
        generation = self._generation
        try:
            with self._db_factory() as db:
                removed = WatchlistEntryRepository(db).delete_entry(user.id, movie_id)
        except SQLAlchemyError as e:
            logger.error(f"Error removing movie {movie_id} from watchlist: {str(e)}")
            raise RemoteUnavailableException("Failed to update watchlist") from e

        with self._lock:
            if not self._still_current(generation, user):
                return False
            self._movies = [m for m in self._movies if m.id != movie_id]
        if removed:
            logger.info(f"User {user.id} removed movie {movie_id}")
        return removed

    def close(self) -> None:
        """Detach from the session and drop local state"""
        self._unsubscribe()
        with self._lock:
            self._generation += 1
            self._movies = []

    def _still_current(self, generation: int, user: SessionUser) -> bool:
        if generation != self._generation:
            logger.info(f"Discarding watchlist result for user {user.id}: session changed")
            return False
        return True

    def _on_session_change(self, previous: Optional[SessionUser], current: Optional[SessionUser]) -> None:
        with self._lock:
            self._generation += 1
            self._movies = []
            self.last_error = None
        if current is not None:
            self._reload_quietly()

    def _reload_quietly(self) -> None:
        # Session callbacks cannot fail the sign-in; ensure_loaded retries from last_error
        try:
            self.load()
        except RemoteUnavailableException as e:
            logger.error(f"Watchlist unavailable after sign-in: {e.message}")
