from marquee.db import Base
from .user import User
from .watchlist import WatchlistEntry

__all__ = ['Base', 'User', 'WatchlistEntry']
