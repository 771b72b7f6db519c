import logging
import uuid
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from showxpress.core.config import settings
from showxpress.core.exceptions import (
    InvalidInputError,
    NotFoundError,
    ShowHasActiveBookingsError,
    StorageFailureError,
)
from showxpress.integrations.tmdb import TMDBClient
from showxpress.models.booking import Booking, BookingStatus
from showxpress.models.movie import Movie
from showxpress.models.show import Show
from showxpress.schemas.show import ShowCreate, ShowUpdate
from showxpress.services.show_inventory import ShowInventory
from showxpress.utils.seating import SeatLayout

logger = logging.getLogger(__name__)


class ShowCatalog:
    """Admin scheduling of shows, plus the read side of the catalog."""

    def __init__(self, db: Session, movie_provider: Optional[TMDBClient] = None):
        self.db = db
        self.inventory = ShowInventory(db)
        self.movie_provider = movie_provider

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not %s", action)
            raise StorageFailureError() from e

    def list_shows(self) -> List[Show]:
        return (
            self.db.query(Show)
            .options(joinedload(Show.movie))
            .order_by(Show.show_date, Show.show_time)
            .all()
        )

    def shows_for_movie(self, tmdb_id: str) -> List[Show]:
        movie = self._find_movie(tmdb_id)
        if not movie:
            raise NotFoundError("Movie", str(tmdb_id))
        return (
            self.db.query(Show)
            .options(joinedload(Show.movie))
            .filter(Show.movie_id == movie.id)
            .order_by(Show.show_date, Show.show_time)
            .all()
        )

    def get_show(self, show_id: Union[str, uuid.UUID]) -> Show:
        return self.inventory.get_show(show_id)

    def _find_movie(self, tmdb_id: str) -> Optional[Movie]:
        return self.db.query(Movie).filter(Movie.tmdb_id == str(tmdb_id)).first()

    def get_or_cache_movie(self, tmdb_id: str) -> Movie:
        """Return the local movie record, fetching it from TMDB the first time."""
        movie = self._find_movie(tmdb_id)
        if movie:
            return movie
        if self.movie_provider is None:
            raise NotFoundError("Movie", str(tmdb_id))

        movie = Movie(**self.movie_provider.movie_for_cache(tmdb_id))
        self.db.add(movie)
        try:
            self.db.commit()
        except IntegrityError as e:
            # tmdb_id is unique: another request cached it first
            self.db.rollback()
            movie = self._find_movie(tmdb_id)
            if movie is None:
                logger.exception("Could not cache movie %s", tmdb_id)
                raise StorageFailureError() from e
            return movie
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not cache movie %s", tmdb_id)
            raise StorageFailureError() from e

        logger.info("Cached movie %s (%s) from TMDB", movie.tmdb_id, movie.title)
        return movie

    def add_show(self, data: ShowCreate) -> Show:
        total_seats = data.total_seats or settings.DEFAULT_TOTAL_SEATS
        seats_per_row = data.seats_per_row or settings.DEFAULT_SEATS_PER_ROW
        try:
            SeatLayout(total_seats=total_seats, seats_per_row=seats_per_row)
        except ValueError as e:
            raise InvalidInputError(str(e), field="total_seats")

        movie = self.get_or_cache_movie(data.movie_id)
        show = Show(
            movie=movie,
            show_price=data.show_price,
            show_date=data.show_date,
            show_time=data.show_time,
            theater=data.theater or settings.DEFAULT_THEATER,
            total_seats=total_seats,
            seats_per_row=seats_per_row,
        )
        self.db.add(show)
        self._commit("add show")
        self.db.refresh(show)
        logger.info("Show %s added for movie %s on %s", show.id, movie.tmdb_id, show.show_date)
        return show

    def update_show(self, show_id: Union[str, uuid.UUID], data: ShowUpdate) -> Show:
        show = self.get_show(show_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(show, field, value)
        self._commit("update show")
        self.db.refresh(show)
        return show

    def delete_show(self, show_id: Union[str, uuid.UUID]) -> None:
        """
        Delete a show that has no confirmed bookings. Cancelled bookings are
        kept and lose their show reference.
        """
        # Waits for in-flight sales; new ones wait for this delete
        show = self.inventory.lock_show(show_id)
        active = (
            self.db.query(Booking)
            .filter(Booking.show_id == show.id, Booking.status == BookingStatus.confirmed.value)
            .count()
        )
        if active:
            self.db.rollback()
            raise ShowHasActiveBookingsError(str(show.id), active)

        self.db.delete(show)
        self._commit("delete show")
        logger.info("Show %s deleted", show_id)
