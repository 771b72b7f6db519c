import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql

from helpers import seat
from showxpress.core.exceptions import InvalidInputError, NotFoundError, ShowHasActiveBookingsError
from showxpress.models.booking import Booking
from showxpress.models.movie import Movie
from showxpress.models.show import Show
from showxpress.schemas.show import ShowCreate, ShowUpdate
from showxpress.services.booking_service import BookingService
from showxpress.services.show_catalog import ShowCatalog


@pytest.fixture
def catalog(db, movie_provider):
    return ShowCatalog(db, movie_provider=movie_provider)


def new_show(movie_id="603", **kwargs):
    data = {
        "movie_id": movie_id,
        "show_price": Decimal("250"),
        "show_date": date(2026, 11, 5),
        "show_time": datetime(2026, 11, 5, 19, 0),
    }
    data.update(kwargs)
    return ShowCreate(**data)


def test_add_show_caches_movie_once(catalog, movie_provider, db):
    first = catalog.add_show(new_show())
    second = catalog.add_show(new_show(show_time=datetime(2026, 11, 5, 22, 0)))

    assert movie_provider.cached == ["603"]
    assert first.movie_id == second.movie_id
    assert first.movie.title == "Movie 603"
    assert db.query(Movie).filter(Movie.tmdb_id == "603").count() == 1


def test_add_show_uses_known_movie(catalog, movie_provider, movie):
    show = catalog.add_show(new_show(movie_id="550"))
    assert show.movie_id == movie.id
    assert movie_provider.cached == []


def test_add_show_defaults(catalog):
    show = catalog.add_show(new_show())
    assert show.theater == "PVR Cinemas"
    assert show.total_seats == 100
    assert show.seats_per_row == 10
    assert show.occupied_seats == []


def test_add_show_custom_layout(catalog):
    show = catalog.add_show(new_show(theater="INOX", total_seats=60, seats_per_row=12))
    assert show.theater == "INOX"
    assert show.layout.rows == "ABCDE"


def test_add_show_rejects_layout_past_row_z(catalog, db):
    with pytest.raises(InvalidInputError) as exc:
        catalog.add_show(new_show(total_seats=300, seats_per_row=10))
    assert exc.value.field == "total_seats"
    assert db.query(Show).count() == 0


def test_add_show_without_provider(db):
    with pytest.raises(NotFoundError):
        ShowCatalog(db).add_show(new_show(movie_id="999"))


def test_list_shows_in_schedule_order(catalog):
    late = catalog.add_show(new_show(show_date=date(2026, 11, 6)))
    early = catalog.add_show(new_show(show_time=datetime(2026, 11, 5, 10, 0)))
    middle = catalog.add_show(new_show())

    assert [s.id for s in catalog.list_shows()] == [early.id, middle.id, late.id]
    assert [s.id for s in catalog.shows_for_movie("603")] == [early.id, middle.id, late.id]


def test_shows_for_unknown_movie(catalog):
    with pytest.raises(NotFoundError):
        catalog.shows_for_movie("12345")


def test_update_show_keeps_unset_fields(catalog):
    show = catalog.add_show(new_show())
    updated = catalog.update_show(show.id, ShowUpdate(show_price=Decimal("300"), theater=None))

    assert updated.show_price == Decimal("300")
    assert updated.theater == "PVR Cinemas"
    assert updated.show_date == date(2026, 11, 5)


def test_get_unknown_show(catalog):
    with pytest.raises(NotFoundError):
        catalog.get_show(uuid.uuid4())
    with pytest.raises(NotFoundError):
        catalog.get_show("not-a-uuid")


def test_delete_show_refused_while_booked(catalog, db, show):
    service = BookingService(db)
    booking = service.create_booking("u1", show.id, [seat("A", 1)])

    with pytest.raises(ShowHasActiveBookingsError) as exc:
        catalog.delete_show(show.id)
    assert exc.value.active_bookings == 1

    service.cancel_booking(booking.id)
    catalog.delete_show(show.id)

    assert db.query(Show).count() == 0
    kept = db.get(Booking, booking.id)
    assert kept.status == "cancelled"
    assert kept.show_id is None


def test_movie_cached_by_concurrent_request(catalog, movie_provider, session_factory, db):
    fetch = movie_provider.movie_for_cache

    def fetch_while_another_request_caches(tmdb_id):
        data = fetch(tmdb_id)
        other = session_factory()
        other.add(Movie(**data))
        other.commit()
        other.close()
        return data

    movie_provider.movie_for_cache = fetch_while_another_request_caches

    show = catalog.add_show(new_show())

    assert db.query(Movie).filter(Movie.tmdb_id == "603").count() == 1
    assert show.movie.tmdb_id == "603"


def test_delete_show_locks_the_show_first(catalog, show, monkeypatch):
    calls = []
    real_lock = catalog.inventory.lock_show

    def spy(show_id):
        calls.append(show_id)
        return real_lock(show_id)

    monkeypatch.setattr(catalog.inventory, "lock_show", spy)
    catalog.delete_show(show.id)
    assert calls == [show.id]


def test_show_lock_is_a_row_lock(catalog, show):
    query = catalog.inventory.show_for_update(show.id)
    sql = str(query.statement.compile(dialect=postgresql.dialect()))
    assert "FOR UPDATE" in sql
