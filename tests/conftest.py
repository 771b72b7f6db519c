import os

# Settings are read at import time; keep the app off Postgres and Stripe.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STRIPE_SECRET_KEY", "")
os.environ.setdefault("TMDB_API_KEY", "")

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from showxpress.api.deps import get_movie_provider, get_payment_gateway
from showxpress.core.security import create_access_token
from showxpress.db.base import Base
from showxpress.db.session import get_db
from showxpress.integrations.payments import PaymentGateway, PaymentIntent
from showxpress.main import app
from showxpress.models.movie import Movie
from showxpress.models.show import Show


class FakePaymentGateway(PaymentGateway):
    """In-memory stand-in for Stripe."""

    def __init__(self):
        self.intents = {}

    def add(self, intent_id, amount, status="succeeded", currency="inr"):
        self.intents[intent_id] = PaymentIntent(
            id=intent_id, status=status, amount=amount, currency=currency,
            client_secret=f"{intent_id}_secret",
        )
        return self.intents[intent_id]

    def create_intent(self, amount, currency, metadata):
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = self.add(intent_id, amount, status="requires_payment_method", currency=currency)
        self.last_metadata = metadata
        return intent

    def retrieve_intent(self, intent_id):
        return self.intents.get(intent_id)


class FakeMovieProvider:
    """In-memory stand-in for TMDB."""

    def __init__(self):
        self.cached = []

    def now_playing(self, page=1):
        return [{"id": 550, "title": "Fight Club"}]

    def popular(self, page=1):
        return [{"id": 680, "title": "Pulp Fiction"}]

    def movie_details(self, tmdb_id):
        return {"id": int(tmdb_id), "title": "Fight Club", "cast": [], "videos": []}

    def movie_for_cache(self, tmdb_id):
        self.cached.append(tmdb_id)
        return {
            "tmdb_id": str(tmdb_id),
            "title": f"Movie {tmdb_id}",
            "overview": "A movie.",
            "poster_path": "/poster.jpg",
            "runtime": 120,
            "genres": [{"id": 18, "name": "Drama"}],
            "cast": [],
        }


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def movie(db):
    movie = Movie(tmdb_id="550", title="Fight Club", poster_path="/fc.jpg", runtime=139)
    db.add(movie)
    db.commit()
    return movie


@pytest.fixture
def make_show(db, movie):
    def _make_show(total_seats=100, seats_per_row=10, price=200):
        show = Show(
            movie_id=movie.id,
            show_price=Decimal(str(price)),
            show_date=date(2026, 11, 1),
            show_time=datetime(2026, 11, 1, 18, 30),
            theater="PVR Cinemas",
            total_seats=total_seats,
            seats_per_row=seats_per_row,
        )
        db.add(show)
        db.commit()
        return show
    return _make_show


@pytest.fixture
def show(make_show):
    return make_show()


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def movie_provider():
    return FakeMovieProvider()


@pytest.fixture
def client(session_factory, payment_gateway, movie_provider):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_movie_provider] = lambda: movie_provider
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token(subject="admin@showxpress.in", role="admin")
    return {"Authorization": f"Bearer {token}"}
