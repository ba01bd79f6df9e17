from enum import Enum, IntEnum

class MovieGenre(IntEnum):
    """TMDB Movie Genres - https://developer.themoviedb.org/reference/genre-movie-list"""
    ACTION = 28
    ADVENTURE = 12
    ANIMATION = 16
    COMEDY = 35
    CRIME = 80
    DOCUMENTARY = 99
    DRAMA = 18
    FAMILY = 10751
    FANTASY = 14
    HISTORY = 36
    HORROR = 27
    MUSIC = 10402
    MYSTERY = 9648
    ROMANCE = 10749
    SCIENCE_FICTION = 878
    TV_MOVIE = 10770
    THRILLER = 53
    WAR = 10752
    WESTERN = 37

class CatalogSection(str, Enum):
    """Browsable catalog sections, keyed by their URL slug"""
    TRENDING = "trending-now"
    UPCOMING = "coming-soon"
    POPULAR = "popular"
    TOP_RATED = "top-rated"

    @property
    def heading(self) -> str:
        return SECTION_TITLES[self]

SECTION_TITLES = {
    CatalogSection.TRENDING: "Trending Movies",
    CatalogSection.UPCOMING: "Coming Soon",
    CatalogSection.POPULAR: "Popular Movies",
    CatalogSection.TOP_RATED: "Top Rated Movies",
}

class GenreHelper:
    """Genre lookups for cards and page titles"""

    @staticmethod
    def get_movie_genre_name(genre_id: int) -> str:
        """Movie genre name from its TMDB id"""
        try:
            return MovieGenre(genre_id).name.replace('_', ' ').title()
        except ValueError:
            return "Unknown"

    @staticmethod
    def get_all_movie_genres() -> dict:
        """All movie genres as {id: name}"""
        return {genre.value: genre.name.replace('_', ' ').title() for genre in MovieGenre}
