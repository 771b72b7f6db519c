from decimal import Decimal

import pytest
import requests

from showxpress.api.deps import get_movie_provider, get_payment_gateway
from showxpress.core.config import settings
from showxpress.core.exceptions import MetadataProviderError, NotFoundError, PaymentProviderError
from showxpress.integrations.payments import StripePaymentGateway, from_minor_units, to_minor_units
from showxpress.integrations.tmdb import TMDBClient


class StubResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload


class StubSession:
    """Records requests and answers them from a url -> response table."""

    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.responses = responses or {}
        self.error = error
        self.calls = []
        self.closed = False

    def _answer(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.responses.get(url, StubResponse(404))

    def close(self):
        self.closed = True

    def get(self, url, **kwargs):
        return self._answer("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._answer("POST", url, **kwargs)


TMDB = "https://tmdb.test/3"
STRIPE = "https://stripe.test/v1"


# ---------------------------------------------------------------------------
# TMDB
# ---------------------------------------------------------------------------


def test_tmdb_sends_bearer_token():
    session = StubSession({f"{TMDB}/movie/now_playing": StubResponse(payload={"results": [{"id": 1}]})})
    client = TMDBClient("read-token", base_url=TMDB + "/", session=session)

    assert client.now_playing(page=2) == [{"id": 1}]
    assert session.headers["Authorization"] == "Bearer read-token"
    assert session.calls[0][2]["params"] == {"page": 2}


def test_tmdb_movie_for_cache():
    session = StubSession({
        f"{TMDB}/movie/550": StubResponse(payload={
            "id": 550, "title": "Fight Club", "runtime": 139, "vote_average": 8.4,
            "genres": [{"id": 18, "name": "Drama"}], "release_date": "1999-10-15",
        }),
        f"{TMDB}/movie/550/credits": StubResponse(payload={"cast": [{"name": "Edward Norton"}]}),
    })
    data = TMDBClient("k", base_url=TMDB, session=session).movie_for_cache("550")

    assert data["tmdb_id"] == "550"
    assert data["title"] == "Fight Club"
    assert data["vote_count"] == 0
    assert data["cast"] == [{"name": "Edward Norton"}]


def test_tmdb_movie_details_merges_cast_and_videos():
    session = StubSession({
        f"{TMDB}/movie/550": StubResponse(payload={"id": 550, "title": "Fight Club"}),
        f"{TMDB}/movie/550/credits": StubResponse(payload={"cast": [{"name": "Brad Pitt"}]}),
        f"{TMDB}/movie/550/videos": StubResponse(payload={"results": [{"key": "abc"}]}),
    })
    details = TMDBClient("k", base_url=TMDB, session=session).movie_details("550")
    assert details["cast"] == [{"name": "Brad Pitt"}]
    assert details["videos"] == [{"key": "abc"}]


def test_tmdb_errors():
    client = TMDBClient("k", base_url=TMDB, session=StubSession())
    with pytest.raises(NotFoundError):
        client.movie_details("0")

    failing = StubSession({f"{TMDB}/movie/popular": StubResponse(500)})
    with pytest.raises(MetadataProviderError):
        TMDBClient("k", base_url=TMDB, session=failing).popular()

    down = StubSession(error=requests.ConnectionError("refused"))
    with pytest.raises(MetadataProviderError):
        TMDBClient("k", base_url=TMDB, session=down).popular()


# ---------------------------------------------------------------------------
# Stripe
# ---------------------------------------------------------------------------


def test_minor_units():
    assert to_minor_units(Decimal("350.50")) == 35050
    assert to_minor_units(Decimal("0.005")) == 1
    assert from_minor_units(35050) == Decimal("350.50")


def test_stripe_create_intent_form():
    session = StubSession({
        f"{STRIPE}/payment_intents": StubResponse(payload={
            "id": "pi_1", "status": "requires_payment_method", "amount": 40000,
            "currency": "inr", "client_secret": "pi_1_secret",
        }),
    })
    gateway = StripePaymentGateway("sk_test", api_base=STRIPE, session=session)
    intent = gateway.create_intent(40000, "inr", {"userId": "user_1", "seats": '["D1", "D2"]'})

    assert intent.id == "pi_1"
    assert intent.client_secret == "pi_1_secret"
    assert not intent.succeeded
    assert session.headers["Authorization"] == "Bearer sk_test"
    form = session.calls[0][2]["data"]
    assert form["amount"] == 40000
    assert form["metadata[userId]"] == "user_1"
    assert form["metadata[seats]"] == '["D1", "D2"]'


def test_stripe_retrieve_intent():
    session = StubSession({
        f"{STRIPE}/payment_intents/pi_1": StubResponse(payload={
            "id": "pi_1", "status": "succeeded", "amount": 20000, "currency": "INR",
        }),
    })
    gateway = StripePaymentGateway("sk_test", api_base=STRIPE, session=session)

    intent = gateway.retrieve_intent("pi_1")
    assert intent.succeeded
    assert intent.currency == "inr"
    assert gateway.retrieve_intent("pi_unknown") is None


def test_stripe_failures():
    failing = StubSession({f"{STRIPE}/payment_intents": StubResponse(402)})
    with pytest.raises(PaymentProviderError):
        StripePaymentGateway("sk", api_base=STRIPE, session=failing).create_intent(100, "inr", {})

    down = StubSession(error=requests.Timeout("slow"))
    with pytest.raises(PaymentProviderError):
        StripePaymentGateway("sk", api_base=STRIPE, session=down).retrieve_intent("pi_1")


# ---------------------------------------------------------------------------
# Request-scoped clients
# ---------------------------------------------------------------------------


def test_clients_close_their_sessions():
    tmdb_session, stripe_session = StubSession(), StubSession()
    TMDBClient("k", base_url=TMDB, session=tmdb_session).close()
    StripePaymentGateway("sk", api_base=STRIPE, session=stripe_session).close()
    assert tmdb_session.closed and stripe_session.closed


def test_movie_provider_closed_after_request(monkeypatch):
    closed = []
    monkeypatch.setattr(TMDBClient, "close", lambda self: closed.append(self))

    dependency = get_movie_provider()
    provider = next(dependency)
    assert isinstance(provider, TMDBClient)
    assert closed == []

    dependency.close()
    assert closed == [provider]


def test_payment_gateway_closed_after_request(monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "sk_test")
    closed = []
    monkeypatch.setattr(StripePaymentGateway, "close", lambda self: closed.append(self))

    dependency = get_payment_gateway()
    gateway = next(dependency)
    assert isinstance(gateway, StripePaymentGateway)

    dependency.close()
    assert closed == [gateway]


def test_no_payment_gateway_without_key(monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "")
    assert list(get_payment_gateway()) == [None]
