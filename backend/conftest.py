import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from marquee import models  # noqa: F401
from marquee.core.container import ServiceContainer
from marquee.core.interfaces import TMDBClientInterface, TMDBResponse
from marquee.core.session import SessionUser
from marquee.db import Base, build_engine, get_db
from marquee.main import create_app
from marquee.repositories.user_repository import UserRepository
from marquee.services.catalog_service import MovieCatalogService
from marquee.services.reservation import ReservationService


def movie_payload(movie_id, title, **overrides):
    payload = {
        "id": movie_id,
        "title": title,
        "overview": f"{title} overview",
        "poster_path": f"/poster{movie_id}.jpg",
        "backdrop_path": f"/backdrop{movie_id}.jpg",
        "release_date": "2024-05-01",
        "vote_average": 7.5,
        "genre_ids": [28],
        "adult": False,
        "popularity": 12.3,
    }
    payload.update(overrides)
    return payload


def default_routes():
    return {
        "trending/movie/week": (200, {"results": [movie_payload(i, f"Trending {i}") for i in range(1, 13)]}),
        "movie/upcoming": (200, {"results": [movie_payload(100 + i, f"Upcoming {i}") for i in range(3)]}),
        "movie/popular": (200, {"results": [movie_payload(200, "Popular One")]}),
        "movie/top_rated": (200, {"results": [movie_payload(300, "Top One")]}),
        "search/movie": (200, {"results": [movie_payload(27205, "Inception", genre_ids=[878])]}),
        "discover/movie": (200, {"results": [movie_payload(35, "Funny Film", genre_ids=[35])]}),
        "genre/movie/list": (200, {"genres": [{"id": 28, "name": "Action"}, {"id": 35, "name": "Comedy"}]}),
        "movie/42": (200, dict(
            movie_payload(42, "X"),
            genres=[{"id": 28, "name": "Action"}],
            runtime=135,
            budget=1000000,
            revenue=5000000,
            status="Released",
        )),
        "movie/42/recommendations": (200, {"results": [movie_payload(43, "Y")]}),
    }


class StubTMDBClient(TMDBClientInterface):
    """Answers from a table of endpoint -> (status, body) or exception; unknown endpoints 404"""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def make_request(self, endpoint, params=None):
        self.calls.append((endpoint, dict(params or {})))
        result = self.routes.get(endpoint)
        if result is None:
            return TMDBResponse({}, 404, False)
        if isinstance(result, Exception):
            raise result
        status_code, data = result
        return TMDBResponse(data, status_code, 200 <= status_code < 300)


class FlakySessionFactory:
    """Wraps a session factory; while ``down`` every call fails like a lost connection"""

    def __init__(self, factory):
        self.factory = factory
        self.down = False

    def __call__(self):
        if self.down:
            raise OperationalError("SELECT 1", {}, Exception("database is down"))
        return self.factory()


class RecordingReservationService(ReservationService):
    def __init__(self):
        self.confirmations = []

    def reserve(self, confirmation):
        self.confirmations.append(confirmation)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'marquee.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def make_user(db_factory):
    def _make(email, username):
        with db_factory() as db:
            user = UserRepository(db).create_user(email, username, "unused-hash")
            return SessionUser(id=user.id, email=user.email, username=user.username)
    return _make


@pytest.fixture
def tmdb():
    return StubTMDBClient(default_routes())


@pytest.fixture
def catalog(tmdb):
    return MovieCatalogService(tmdb)


@pytest.fixture
def reservations():
    return RecordingReservationService()


@pytest.fixture
def container(db_factory, catalog, reservations):
    return ServiceContainer(db_factory, catalog, reservation_service=reservations)


@pytest.fixture
def client(container, db_factory):
    app = create_app(container)

    def override_get_db():
        db = db_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def login(client):
    """Register (if needed) and log in; returns auth headers"""
    def _login(email="ada@mail.com", username="ada", password="secret123"):
        client.post("/auth/register", json={"email": email, "username": username, "password": password})
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return _login
