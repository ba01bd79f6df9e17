from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from marquee.core.exceptions import WatchlistEntryExistsException
from marquee.models.watchlist import WatchlistEntry
from marquee.repositories.base_repository import BaseRepository
from marquee.schemas.movie import Movie

class WatchlistEntryRepository(BaseRepository[WatchlistEntry]):
    """Watchlist rows keyed by (user_id, movie_id)"""

    def __init__(self, db: Session):
        super().__init__(WatchlistEntry, db)

    def list_for_user(self, user_id: int) -> List[WatchlistEntry]:
        """All entries of a user, newest first"""
        return (
            self.db.query(WatchlistEntry)
            .filter(WatchlistEntry.user_id == user_id)
            .order_by(WatchlistEntry.created_at.desc(), WatchlistEntry.id.desc())
            .all()
        )

    def add_entry(self, user_id: int, movie: Movie) -> WatchlistEntry:
        """Insert a snapshot of ``movie``; a second insert for the same pair conflicts"""
        try:
            return self.create({
                "user_id": user_id,
                "movie_id": movie.id,
                "movie_title": movie.title,
                "poster_path": movie.poster_path or None,
                "release_date": movie.release_date or None,
                "vote_average": movie.vote_average,
            })
        except IntegrityError:
            self.db.rollback()
            raise WatchlistEntryExistsException(f"Movie {movie.id} is already in the watchlist")

    def delete_entry(self, user_id: int, movie_id: int) -> bool:
        """Delete the row for (user_id, movie_id); False when there was none"""
        deleted = (
            self.db.query(WatchlistEntry)
            .filter(WatchlistEntry.user_id == user_id, WatchlistEntry.movie_id == movie_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0
