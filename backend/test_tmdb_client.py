import pytest
import requests

from marquee.core.interfaces import TMDBConfig, TMDBError
from marquee.core.tmdb_client import TMDBClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body=""):
        self.status_code = status_code
        self._payload = payload
        self.text = body

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def make_client(session):
    return TMDBClient(TMDBConfig(api_key="k", base_url="https://tmdb.test/3/", timeout=5), session=session)


def test_request_carries_key_and_language():
    session = FakeSession(FakeResponse(payload={"results": []}))

    resp = make_client(session).make_request("/movie/popular", {"page": 2})

    assert resp.success and resp.status_code == 200
    assert resp.data == {"results": []}
    url, params, timeout = session.requests[0]
    assert url == "https://tmdb.test/3/movie/popular"
    assert params == {"page": 2, "api_key": "k", "language": "en-US"}
    assert timeout == 5
    assert session.headers["accept"] == "application/json"


def test_error_status_is_unsuccessful_response():
    session = FakeSession(FakeResponse(404, body='{"status_message": "not found"}'))

    resp = make_client(session).make_request("movie/1")

    assert not resp.success
    assert resp.status_code == 404
    assert resp.data == {}


def test_transport_failure_raises():
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))

    with pytest.raises(TMDBError):
        make_client(session).make_request("movie/popular")


def test_undecodable_body_raises():
    session = FakeSession(FakeResponse(200, payload=None, body="<html>"))

    with pytest.raises(TMDBError) as exc_info:
        make_client(session).make_request("movie/popular")
    assert exc_info.value.status_code == 200
