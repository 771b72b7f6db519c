from typing import Any, Optional, List
from pydantic import BaseModel, UUID4


# Compact movie for nested show/booking responses
class MovieSummary(BaseModel):
    id: UUID4
    tmdb_id: str
    title: str
    poster_path: Optional[str] = None
    runtime: Optional[int] = None

    class Config:
        from_attributes = True


# Cached movie: DB response
class Movie(MovieSummary):
    overview: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    genres: Optional[List[Any]] = None
    original_language: Optional[str] = None
    tagline: Optional[str] = None

    class Config:
        from_attributes = True
