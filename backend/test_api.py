from datetime import date, timedelta

import pytest

from conftest import FlakySessionFactory
from marquee.core.interfaces import TMDBError


def movie_body(movie_id=42, title="X"):
    return {
        "id": movie_id,
        "title": title,
        "overview": "Overview",
        "poster_path": f"/p{movie_id}.jpg",
        "backdrop_path": f"/b{movie_id}.jpg",
        "release_date": "2024-05-01",
        "vote_average": 7.5,
        "genre_ids": [28],
    }


def booking_body(**overrides):
    body = {
        "show_date": (date.today() + timedelta(days=1)).isoformat(),
        "show_time": "19:00",
        "seats": "2",
        "snacks": ["popcorn", "soda"],
        "cab_requested": True,
        "pickup_address": "1 Main St",
        "drop_address": "Cinema Plaza",
    }
    body.update(overrides)
    return body


class TestAuth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_register_and_me(self, client, login):
        headers = login()

        resp = client.get("/auth/me", headers=headers)

        assert resp.status_code == 200
        assert resp.json()["email"] == "ada@mail.com"
        assert "hashed_password" not in resp.json()

    def test_duplicate_email_is_rejected(self, client):
        body = {"email": "ada@mail.com", "username": "ada", "password": "secret123"}
        assert client.post("/auth/register", json=body).status_code == 201

        resp = client.post("/auth/register", json=dict(body, username="other"))

        assert resp.status_code == 400

    def test_wrong_password(self, client, login):
        login()
        resp = client.post("/auth/login", json={"email": "ada@mail.com", "password": "wrong-pass"})
        assert resp.status_code == 401

    @pytest.mark.parametrize("path", ["/movies/home", "/watchlist", "/bookings/options"])
    def test_protected_routes_need_token(self, client, path):
        assert client.get(path).status_code == 401

    def test_garbage_token(self, client):
        resp = client.get("/watchlist", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401

    def test_token_is_rejected_after_logout(self, client, login):
        headers = login()
        assert client.post("/auth/logout", headers=headers).status_code == 204

        assert client.post("/watchlist", json=movie_body(), headers=headers).status_code == 401
        assert client.get("/watchlist", headers=headers).status_code == 401
        assert client.get("/auth/me", headers=headers).status_code == 401
        assert client.post("/auth/logout", headers=headers).status_code == 401

        fresh = login()
        resp = client.get("/watchlist", headers=fresh)
        assert resp.status_code == 200
        assert resp.json()["count"] == 0

    def test_logout_leaves_other_tokens_valid(self, client, login):
        first = login()
        second = login()

        client.post("/auth/logout", headers=first)

        assert client.get("/auth/me", headers=second).status_code == 200


class TestMovies:
    def test_home(self, client, login):
        resp = client.get("/movies/home", headers=login())

        assert resp.status_code == 200
        sections = resp.json()["sections"]
        assert [s["title"] for s in sections] == ["Trending Now", "Coming Soon"]
        assert len(sections[0]["items"]) == 10
        card = sections[0]["items"][0]
        assert card["image_url"] == "https://image.tmdb.org/t/p/w500/poster1.jpg"
        assert card["year"] == "2024"
        assert card["in_watchlist"] is False

    def test_cards_reflect_watchlist(self, client, login):
        headers = login()
        client.post("/watchlist", json=movie_body(1, "Trending 1"), headers=headers)

        items = client.get("/movies/home", headers=headers).json()["sections"][0]["items"]

        assert items[0]["in_watchlist"] is True
        assert items[1]["in_watchlist"] is False

    def test_explore_search(self, client, login):
        resp = client.get("/movies/explore", params={"query": "inception"}, headers=login())

        body = resp.json()
        assert body["title"] == 'Search Results for "inception"'
        assert body["count"] == 1
        assert body["items"][0]["id"] == 27205

    def test_explore_section(self, client, login):
        body = client.get("/movies/explore", params={"section": "top-rated"}, headers=login()).json()
        assert body["title"] == "Top Rated Movies"
        assert body["section"] == "top-rated"

    def test_explore_unknown_section(self, client, login):
        resp = client.get("/movies/explore", params={"section": "cult"}, headers=login())
        assert resp.status_code == 422

    def test_genres(self, client, login):
        genres = client.get("/movies/genres", headers=login()).json()["genres"]
        assert genres == [{"id": 28, "name": "Action"}, {"id": 35, "name": "Comedy"}]

    def test_details(self, client, login):
        body = client.get("/movies/42", headers=login()).json()

        assert body["movie"]["title"] == "X"
        assert body["runtime_label"] == "2h 15m"
        assert body["in_watchlist"] is False
        assert [r["id"] for r in body["recommendations"]] == [43]

    def test_details_survive_missing_recommendations(self, client, login, tmdb):
        tmdb.routes["movie/42/recommendations"] = TMDBError("timeout")

        body = client.get("/movies/42", headers=login()).json()

        assert body["recommendations"] == []

    def test_unknown_movie(self, client, login):
        assert client.get("/movies/999", headers=login()).status_code == 404

    def test_catalog_outage_is_503(self, client, login, tmdb):
        tmdb.routes["trending/movie/week"] = TMDBError("timeout")
        resp = client.get("/movies/home", headers=login())
        assert resp.status_code == 503


class TestWatchlist:
    def test_add_list_remove(self, client, login):
        headers = login()

        resp = client.post("/watchlist", json=movie_body(), headers=headers)
        assert resp.status_code == 201
        assert resp.json()["in_watchlist"] is True
        assert client.get("/watchlist/42", headers=headers).json() == {"movie_id": 42, "saved": True}

        listing = client.get("/watchlist", headers=headers).json()
        assert listing["count"] == 1
        assert listing["items"][0]["title"] == "X"

        resp = client.delete("/watchlist/42", headers=headers)
        assert resp.json() == {"movie_id": 42, "removed": True}
        assert client.get("/watchlist/42", headers=headers).json()["saved"] is False

    def test_newest_first(self, client, login):
        headers = login()
        for movie_id in (1, 2, 3):
            client.post("/watchlist", json=movie_body(movie_id, f"M{movie_id}"), headers=headers)

        ids = [item["id"] for item in client.get("/watchlist", headers=headers).json()["items"]]
        refreshed = client.get("/watchlist", params={"refresh": True}, headers=headers).json()["items"]

        assert ids == [3, 2, 1]
        assert [item["id"] for item in refreshed] == [3, 2, 1]

    def test_duplicate_is_conflict(self, client, login):
        headers = login()
        client.post("/watchlist", json=movie_body(), headers=headers)

        resp = client.post("/watchlist", json=movie_body(), headers=headers)

        assert resp.status_code == 409
        assert client.get("/watchlist", headers=headers).json()["count"] == 1

    def test_removing_unsaved_movie(self, client, login):
        resp = client.delete("/watchlist/7", headers=login())
        assert resp.status_code == 200
        assert resp.json()["removed"] is False

    def test_users_are_isolated(self, client, login):
        ada = login()
        client.post("/watchlist", json=movie_body(), headers=ada)
        bob = login("bob@mail.com", "bob")

        assert client.get("/watchlist", headers=bob).json()["count"] == 0
        assert client.get("/watchlist/42", headers=bob).json()["saved"] is False

    def test_logout_drops_workspace_and_relogin_reloads(self, client, login, container):
        headers = login()
        client.post("/watchlist", json=movie_body(), headers=headers)
        user_id = client.get("/auth/me", headers=headers).json()["id"]

        assert client.post("/auth/logout", headers=headers).status_code == 204
        assert not container.has_workspace(user_id)

        headers = login()
        assert container.has_workspace(user_id)
        items = client.get("/watchlist", headers=headers).json()["items"]
        assert [(item["id"], item["title"]) for item in items] == [(42, "X")]

    def test_outage_during_sign_in_is_reported_then_recovers(self, client, login, container, db_factory):
        headers = login()
        client.post("/watchlist", json=movie_body(7, "Seven"), headers=headers)
        client.post("/auth/logout", headers=headers)
        flaky = FlakySessionFactory(db_factory)
        container.db_factory = flaky

        flaky.down = True
        headers = login()
        assert client.get("/watchlist", headers=headers).status_code == 503
        assert client.get("/watchlist/7", headers=headers).status_code == 503

        flaky.down = False
        listing = client.get("/watchlist", headers=headers).json()
        assert [item["id"] for item in listing["items"]] == [7]
        assert client.get("/watchlist/7", headers=headers).json()["saved"] is True
        assert client.post("/watchlist", json=movie_body(7, "Seven"), headers=headers).status_code == 409
        assert client.get("/watchlist/7", headers=headers).json()["saved"] is True


class TestBookings:
    def test_options(self, client, login):
        body = client.get("/bookings/options", headers=login()).json()

        assert body["show_times"] == ["10:00", "13:00", "16:00", "19:00", "22:00"]
        assert [s["id"] for s in body["snacks"]] == ["popcorn", "soda", "nachos", "candy"]
        assert body["ticket_price"] == 12
        assert body["cab_fee"] == 15
        assert body["max_seats"] == 10

    def test_quote(self, client, login):
        resp = client.post("/bookings/quote", json=booking_body(), headers=login())

        assert resp.json() == {"seat_count": 2, "tickets": 24, "snacks": 8, "cab": 15, "total": 47}

    def test_quote_with_unfinished_seats(self, client, login):
        resp = client.post("/bookings/quote", json=booking_body(seats="", cab_requested=False), headers=login())
        assert resp.json()["total"] == 8

    def test_confirm(self, client, login, reservations):
        resp = client.post("/bookings/42/confirm", json=booking_body(seats=2), headers=login())

        assert resp.status_code == 200
        body = resp.json()
        assert body["movie_title"] == "X"
        assert body["total"] == 47
        assert body["message"] == "Your tickets for X have been booked successfully."
        [confirmation] = reservations.confirmations
        assert confirmation.movie_id == 42
        assert confirmation.seat_count == 2

    @pytest.mark.parametrize("overrides", [
        {"show_time": "11:11"},
        {"show_date": (date.today() - timedelta(days=1)).isoformat()},
        {"seats": "11"},
        {"seats": "two"},
        {"pickup_address": ""},
        {"snacks": ["caviar"]},
    ])
    def test_invalid_booking_is_rejected(self, client, login, reservations, overrides):
        resp = client.post("/bookings/42/confirm", json=booking_body(**overrides), headers=login())

        assert resp.status_code == 422
        assert reservations.confirmations == []

    def test_unknown_movie(self, client, login, reservations):
        resp = client.post("/bookings/999/confirm", json=booking_body(), headers=login())
        assert resp.status_code == 404
        assert reservations.confirmations == []
