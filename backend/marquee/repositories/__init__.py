from .base_repository import BaseRepository
from .user_repository import UserRepository
from .watchlist_repository import WatchlistEntryRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "WatchlistEntryRepository"
]
