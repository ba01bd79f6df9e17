from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

# TMDB Response Schemas
class Movie(BaseModel):
    """A catalog movie record; immutable once fetched"""
    id: int
    title: str
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    release_date: str = ""
    vote_average: float = 0.0
    genre_ids: List[int] = Field(default_factory=list)
    adult: bool = False

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("overview", "poster_path", "backdrop_path", "release_date", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("vote_average", mode="before")
    @classmethod
    def none_as_zero(cls, value):
        return 0.0 if value is None else value

class Genre(BaseModel):
    id: int
    name: str

class MovieDetails(Movie):
    """Extended record returned by the details endpoint"""
    genres: List[Genre] = Field(default_factory=list)
    runtime: Optional[int] = None
    budget: int = 0
    revenue: int = 0
    status: str = ""

    @field_validator("budget", "revenue", mode="before")
    @classmethod
    def money_none_as_zero(cls, value):
        return 0 if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def status_none_as_empty(cls, value):
        return "" if value is None else value

# View Schemas
class MovieCard(BaseModel):
    """Display-ready movie summary used by every list view"""
    id: int
    title: str
    rating: float
    year: str
    genre: str
    image_url: str
    backdrop_url: str
    overview: str = ""
    release_date: str = ""
    in_watchlist: bool = False

class MovieSection(BaseModel):
    title: str
    items: List[MovieCard]

class HomeResponse(BaseModel):
    sections: List[MovieSection]

class ExploreResponse(BaseModel):
    title: str
    section: Optional[str] = None
    query: Optional[str] = None
    genre_id: Optional[int] = None
    count: int
    items: List[MovieCard]

class GenreListResponse(BaseModel):
    genres: List[Genre]

class MovieDetailsResponse(BaseModel):
    movie: MovieDetails
    runtime_label: Optional[str] = None
    poster_url: str
    backdrop_url: str
    in_watchlist: bool
    recommendations: List[MovieCard] = Field(default_factory=list)
