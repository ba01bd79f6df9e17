import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from marquee.core.container import ServiceContainer
from marquee.core.enums import CatalogSection
from marquee.core.exceptions import CatalogUnavailableException
from marquee.routers.common import handle_exception
from marquee.routers.dependencies import (
    get_container, get_discovery, get_catalog, get_session_user, get_watchlist_store
)
from marquee.schemas.movie import (
    ExploreResponse, GenreListResponse, HomeResponse, MovieDetailsResponse, MovieSection
)
from marquee.services.catalog_service import MovieCatalogService
from marquee.services.discovery_service import DiscoveryService
from marquee.services.movie_presenter import format_movie_cards, format_runtime, get_image_url
from marquee.services.watchlist_store import WatchlistStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"], dependencies=[Depends(get_session_user)])

@router.get("/home", response_model=HomeResponse)
def get_home(
    discovery: DiscoveryService = Depends(get_discovery),
    watchlist: WatchlistStore = Depends(get_watchlist_store),
    container: ServiceContainer = Depends(get_container),
):
    """Trending and upcoming rows for the landing page"""
    try:
        base_url = container.settings.TMDB_IMAGE_BASE_URL
        sections = [
            MovieSection(title=title, items=format_movie_cards(movies, watchlist.is_saved, base_url))
            for title, movies in discovery.home()
        ]
        return HomeResponse(sections=sections)
    except Exception as e:
        raise handle_exception(e)

@router.get("/explore", response_model=ExploreResponse)
def explore_movies(
    section: Optional[CatalogSection] = Query(None, description="trending-now, coming-soon, popular or top-rated"),
    query: Optional[str] = Query(None, description="Search query"),
    genre_id: Optional[int] = Query(None, description="TMDB genre id"),
    discovery: DiscoveryService = Depends(get_discovery),
    watchlist: WatchlistStore = Depends(get_watchlist_store),
    container: ServiceContainer = Depends(get_container),
):
    try:
        result = discovery.explore(section=section, query=query, genre_id=genre_id)
        items = format_movie_cards(result.movies, watchlist.is_saved, container.settings.TMDB_IMAGE_BASE_URL)
        return ExploreResponse(
            title=result.title,
            section=result.section.value if result.section else None,
            query=result.query,
            genre_id=result.genre_id,
            count=len(items),
            items=items,
        )
    except Exception as e:
        raise handle_exception(e)

@router.get("/genres", response_model=GenreListResponse)
def get_genres(catalog: MovieCatalogService = Depends(get_catalog)):
    try:
        return GenreListResponse(genres=catalog.get_genres())
    except Exception as e:
        raise handle_exception(e)

@router.get("/{movie_id}", response_model=MovieDetailsResponse)
def get_movie_details(
    movie_id: int,
    catalog: MovieCatalogService = Depends(get_catalog),
    watchlist: WatchlistStore = Depends(get_watchlist_store),
    container: ServiceContainer = Depends(get_container),
):
    """Movie details, watchlist status and recommendations"""
    try:
        movie = catalog.get_movie_details(movie_id)
        try:
            recommendations = catalog.get_recommendations(movie_id)
        except CatalogUnavailableException as e:
            logger.warning(f"Recommendations unavailable for movie {movie_id}: {e.message}")
            recommendations = []

        base_url = container.settings.TMDB_IMAGE_BASE_URL
        return MovieDetailsResponse(
            movie=movie,
            runtime_label=format_runtime(movie.runtime),
            poster_url=get_image_url(movie.poster_path, "w500", base_url),
            backdrop_url=get_image_url(movie.backdrop_path, "original", base_url),
            in_watchlist=watchlist.is_saved(movie_id),
            recommendations=format_movie_cards(recommendations, watchlist.is_saved, base_url),
        )
    except Exception as e:
        raise handle_exception(e)
