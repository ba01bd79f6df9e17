from fastapi import APIRouter, Depends, Query, status

from marquee.core.container import ServiceContainer
from marquee.routers.common import handle_exception
from marquee.routers.dependencies import get_container, get_watchlist_store
from marquee.schemas.movie import Movie, MovieCard
from marquee.schemas.watchlist import WatchlistRemoveResponse, WatchlistResponse, WatchlistStatusResponse
from marquee.services.movie_presenter import format_movie_card, format_movie_cards
from marquee.services.watchlist_store import WatchlistStore

router = APIRouter(prefix="/watchlist", tags=["watchlist"])

@router.get("", response_model=WatchlistResponse)
def get_my_watchlist(
    refresh: bool = Query(False, description="Reload from the database first"),
    watchlist: WatchlistStore = Depends(get_watchlist_store),
    container: ServiceContainer = Depends(get_container),
):
    """The signed-in user's saved movies, newest first"""
    try:
        if refresh:
            watchlist.load()
        items = format_movie_cards(
            watchlist.movies, lambda movie_id: True, container.settings.TMDB_IMAGE_BASE_URL
        )
        return WatchlistResponse(items=items, count=len(items), loading=watchlist.loading)
    except Exception as e:
        raise handle_exception(e)

@router.post("", response_model=MovieCard, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    movie: Movie,
    watchlist: WatchlistStore = Depends(get_watchlist_store),
    container: ServiceContainer = Depends(get_container),
):
    try:
        watchlist.add(movie)
        return format_movie_card(movie, watchlist.is_saved(movie.id), container.settings.TMDB_IMAGE_BASE_URL)
    except Exception as e:
        raise handle_exception(e)

@router.get("/{movie_id}", response_model=WatchlistStatusResponse)
def get_watchlist_status(movie_id: int, watchlist: WatchlistStore = Depends(get_watchlist_store)):
    return WatchlistStatusResponse(movie_id=movie_id, saved=watchlist.is_saved(movie_id))

@router.delete("/{movie_id}", response_model=WatchlistRemoveResponse)
def remove_from_watchlist(movie_id: int, watchlist: WatchlistStore = Depends(get_watchlist_store)):
    try:
        return WatchlistRemoveResponse(movie_id=movie_id, removed=watchlist.remove(movie_id))
    except Exception as e:
        raise handle_exception(e)
