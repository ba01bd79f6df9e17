from datetime import date
from typing import Callable, Iterable, List, Optional

from marquee.core.enums import GenreHelper
from marquee.schemas.movie import Movie, MovieCard

TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
PLACEHOLDER_IMAGE = "/placeholder.svg"
IMAGE_SIZES = ("w200", "w300", "w500", "original")


def get_image_url(path: Optional[str], size: str = "w500", base_url: str = TMDB_IMAGE_BASE_URL) -> str:
    if not path:
        return PLACEHOLDER_IMAGE
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if size not in IMAGE_SIZES:
        raise ValueError(f"Unsupported image size: {size}")
    return f"{base_url}/{size}{path}"


def release_year(release_date: str) -> str:
    try:
        return str(date.fromisoformat(release_date).year)
    except (TypeError, ValueError):
        return "N/A"


def genre_label(movie: Movie) -> str:
    for genre_id in movie.genre_ids:
        name = GenreHelper.get_movie_genre_name(genre_id)
        if name != "Unknown":
            return name
    return "Movie"


def format_runtime(minutes: Optional[int]) -> Optional[str]:
    if not minutes:
        return None
    return f"{minutes // 60}h {minutes % 60}m"


def format_movie_card(movie: Movie, saved: bool = False, base_url: str = TMDB_IMAGE_BASE_URL) -> MovieCard:
    return MovieCard(
        id=movie.id,
        title=movie.title,
        rating=movie.vote_average,
        year=release_year(movie.release_date),
        genre=genre_label(movie),
        image_url=get_image_url(movie.poster_path, "w500", base_url),
        backdrop_url=get_image_url(movie.backdrop_path, "original", base_url),
        overview=movie.overview,
        release_date=movie.release_date,
        in_watchlist=saved,
    )


def format_movie_cards(
    movies: Iterable[Movie],
    is_saved: Callable[[int], bool] = lambda movie_id: False,
    base_url: str = TMDB_IMAGE_BASE_URL,
) -> List[MovieCard]:
    return [format_movie_card(movie, is_saved(movie.id), base_url) for movie in movies]
