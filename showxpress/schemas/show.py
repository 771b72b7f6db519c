from typing import Optional, List
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import date, datetime

from showxpress.schemas.movie import MovieSummary


# Show: Create (admin POST /admin/shows)
class ShowCreate(BaseModel):
    movie_id: str                                   # TMDB movie id
    show_price: Decimal = Field(gt=0)
    show_date: date
    show_time: datetime
    theater: Optional[str] = None
    total_seats: Optional[int] = Field(None, ge=1)
    seats_per_row: Optional[int] = Field(None, ge=1)


# Show: Update (admin PATCH /admin/shows/{id})
class ShowUpdate(BaseModel):
    show_price: Optional[Decimal] = Field(None, gt=0)
    show_date: Optional[date] = None
    show_time: Optional[datetime] = None
    theater: Optional[str] = None


# Compact show for booking responses
class ShowSummary(BaseModel):
    id: UUID4
    show_date: date
    show_time: datetime
    theater: str

    class Config:
        from_attributes = True


# Show: DB response, with the seat inventory
class Show(ShowSummary):
    movie_id: UUID4
    show_price: Decimal
    total_seats: int
    seats_per_row: int
    occupied_seats: List[str] = []
    movie: Optional[MovieSummary] = None

    class Config:
        from_attributes = True
