import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from marquee.core.cache import CacheService
from marquee.core.exceptions import CatalogUnavailableException, MovieNotFoundException
from marquee.core.interfaces import TMDBClientInterface, TMDBError, TMDBResponse
from marquee.schemas.movie import Genre, Movie, MovieDetails

logger = logging.getLogger(__name__)

CACHE_TTL_1H = 60 * 60

class MovieCatalogService:
    """Movie lists, genres and details from TMDB.

    Every failure to reach TMDB, or any non-2xx answer, is reported as
    ``CatalogUnavailableException``. The only exception is a 404 on a
    single-movie lookup, which becomes ``MovieNotFoundException``.
    """

    def __init__(self, client: TMDBClientInterface, cache: Optional[CacheService] = None, cache_ttl: int = CACHE_TTL_1H):
        self.client = client
        self.cache = cache
        self.cache_ttl = cache_ttl

    def _request(self, endpoint: str, params: Dict = None, cache_key: Optional[str] = None) -> TMDBResponse:
        if cache_key and self.cache is not None:
            cached = self.cache.get_json(cache_key)
            if cached is not None:
                return TMDBResponse(cached, 200, True)
        try:
            resp = self.client.make_request(endpoint, params)
        except TMDBError as e:
            logger.error(f"Catalog request {endpoint} failed: {e.message}")
            raise CatalogUnavailableException(f"Movie catalog unavailable: {e.message}")
        if resp.success and cache_key and self.cache is not None:
            self.cache.set_json(cache_key, resp.data, self.cache_ttl)
        return resp

    def _fetch(self, endpoint: str, what: str, params: Dict = None, cache_key: Optional[str] = None) -> Dict[str, Any]:
        resp = self._request(endpoint, params, cache_key)
        if not resp.success:
            raise CatalogUnavailableException(f"Failed to fetch {what}")
        return resp.data

    def _movies(self, data: Dict[str, Any]) -> List[Movie]:
        movies = []
        for item in data.get("results") or []:
            try:
                movies.append(Movie.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed catalog record {item.get('id')}: {e.error_count()} errors")
        return movies

    def get_trending(self) -> List[Movie]:
        """Movies trending this week"""
        return self._movies(self._fetch("trending/movie/week", "trending movies", cache_key="movie:trending:week"))

    def get_popular(self, page: int = 1) -> List[Movie]:
        return self._movies(self._fetch("movie/popular", "popular movies", {"page": page}, f"movie:popular:p{page}"))

    def get_top_rated(self, page: int = 1) -> List[Movie]:
        return self._movies(self._fetch("movie/top_rated", "top rated movies", {"page": page}, f"movie:top_rated:p{page}"))

    def get_upcoming(self, page: int = 1) -> List[Movie]:
        return self._movies(self._fetch("movie/upcoming", "upcoming movies", {"page": page}, f"movie:upcoming:p{page}"))

    def search_movies(self, query: str, page: int = 1) -> List[Movie]:
        """Search movies by title; a blank query matches nothing"""
        query = (query or "").strip()
        if not query:
            return []
        return self._movies(self._fetch("search/movie", "search results", {"query": query, "page": page}))

    def get_movies_by_genre(self, genre_id: int, page: int = 1) -> List[Movie]:
        params = {"with_genres": genre_id, "page": page}
        return self._movies(self._fetch("discover/movie", "genre movies", params, f"movie:discover:with_genres={genre_id}:p{page}"))

    def get_genres(self) -> List[Genre]:
        data = self._fetch("genre/movie/list", "genres", cache_key="movie:genres")
        return [Genre.model_validate(genre) for genre in data.get("genres") or []]

    def get_movie_details(self, movie_id: int) -> MovieDetails:
        resp = self._request(f"movie/{movie_id}", cache_key=f"movie:{movie_id}:details")
        if resp.status_code == 404:
            raise MovieNotFoundException(f"Movie {movie_id} not found")
        if not resp.success:
            raise CatalogUnavailableException("Failed to fetch movie details")
        if not resp.data.get("id"):
            raise MovieNotFoundException(f"Movie {movie_id} not found")
        return MovieDetails.model_validate(resp.data)

    def get_recommendations(self, movie_id: int) -> List[Movie]:
        resp = self._request(f"movie/{movie_id}/recommendations")
        if resp.status_code == 404:
            return []
        if not resp.success:
            raise CatalogUnavailableException("Failed to fetch recommendations")
        return self._movies(resp.data)
