import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from marquee.core.enums import CatalogSection, GenreHelper
from marquee.core.exceptions import CatalogUnavailableException
from marquee.schemas.movie import Movie
from marquee.services.catalog_service import MovieCatalogService

logger = logging.getLogger(__name__)

HOME_SECTION_SIZE = 10


@dataclass
class ExploreResult:
    title: str
    movies: List[Movie]
    section: Optional[CatalogSection] = None
    query: Optional[str] = None
    genre_id: Optional[int] = None


class DiscoveryService:
    """Composes catalog calls into the home and explore pages"""

    def __init__(self, catalog: MovieCatalogService):
        self.catalog = catalog

    def home(self) -> List[Tuple[str, List[Movie]]]:
        return [
            ("Trending Now", self.catalog.get_trending()[:HOME_SECTION_SIZE]),
            ("Coming Soon", self.catalog.get_upcoming()[:HOME_SECTION_SIZE]),
        ]

    def section_movies(self, section: CatalogSection) -> List[Movie]:
        if section == CatalogSection.UPCOMING:
            return self.catalog.get_upcoming()
        if section == CatalogSection.POPULAR:
            return self.catalog.get_popular()
        if section == CatalogSection.TOP_RATED:
            return self.catalog.get_top_rated()
        return self.catalog.get_trending()

    def explore(
        self,
        section: Optional[CatalogSection] = None,
        query: Optional[str] = None,
        genre_id: Optional[int] = None,
    ) -> ExploreResult:
        """A search query wins over a genre filter, which wins over a section"""
        query = (query or "").strip()
        if query:
            return ExploreResult(
                title=f'Search Results for "{query}"',
                movies=self.catalog.search_movies(query),
                query=query,
            )
        if genre_id is not None:
            return ExploreResult(
                title=f"{self.genre_name(genre_id)} Movies",
                movies=self.catalog.get_movies_by_genre(genre_id),
                genre_id=genre_id,
            )
        section = section or CatalogSection.TRENDING
        return ExploreResult(title=section.heading, movies=self.section_movies(section), section=section)

    def genre_name(self, genre_id: int) -> str:
        try:
            for genre in self.catalog.get_genres():
                if genre.id == genre_id:
                    return genre.name
        except CatalogUnavailableException as e:
            logger.warning(f"Genre list unavailable, using built-in names: {e.message}")
        name = GenreHelper.get_movie_genre_name(genre_id)
        return "Genre" if name == "Unknown" else name
