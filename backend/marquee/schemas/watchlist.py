from pydantic import BaseModel
from typing import List
from marquee.schemas.movie import MovieCard

class WatchlistResponse(BaseModel):
    """The signed-in user's watchlist, newest first"""
    items: List[MovieCard]
    count: int
    loading: bool = False

class WatchlistStatusResponse(BaseModel):
    movie_id: int
    saved: bool

class WatchlistRemoveResponse(BaseModel):
    movie_id: int
    removed: bool
