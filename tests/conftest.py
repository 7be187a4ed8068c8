import json
import threading
from collections import namedtuple

import pytest

from kino_client import logging_service
from kino_client.api_client import ApiClient
from kino_client.frontend import Frontend
from kino_client.storage import LocalStore

BASE_URL = "http://backend.test/api"

Call = namedtuple("Call", "method path headers json")


class FakeResponse:
    def __init__(self, status_code=200, body=None, content_type="application/json", content=None):
        self.status_code = status_code
        self._body = body
        self.headers = {"content-type": content_type} if content_type else {}
        if content is not None:
            self.content = content
        else:
            self.content = json.dumps(body).encode() if body is not None else b""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeHttp:
    """Подменяет requests.Session: отвечает заранее заданными ответами и записывает вызовы"""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.lock = threading.Lock()

    def add(self, method, path, body=None, status=200, **kwargs):
        self.routes[(method, path)] = FakeResponse(status, body, **kwargs)

    def fail(self, method, path, error):
        self.routes[(method, path)] = error

    def handle(self, method, path, handler):
        self.routes[(method, path)] = handler

    def request(self, method, url, headers=None, json=None, timeout=None):
        path = url[len(BASE_URL):]
        with self.lock:
            self.calls.append(Call(method, path, headers or {}, json))
        route = self.routes.get((method, path))
        if route is None:
            return FakeResponse(404, {"error": "not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(json)
        return route

    def count(self, method, path):
        return sum(1 for call in self.calls if call.method == method and call.path == path)

    def last(self, method, path):
        matches = [call for call in self.calls if call.method == method and call.path == path]
        return matches[-1] if matches else None


MOVIES = [
    {"id": 3, "title": "Дюна", "title_en": "Dune", "description": "Пустыня", "duration_mins": 155,
     "poster_url": "/posters/dune.jpg", "release_year": 2021},
    {"id": 4, "title": "Интерстеллар", "description": "Космос", "duration_mins": 169,
     "poster_url": "/posters/interstellar.jpg"},
]

SESSIONS = [
    {"id": 10, "movie_id": 3, "hall_id": 1, "start_time": "2026-10-20T19:00:00Z", "base_price": 450},
    {"id": 11, "movie_id": 3, "hall_id": 2, "start_time": "2026-10-20T22:00:00Z", "base_price": 500},
]

SEATS_HALL_1 = [
    {"id": 5, "hall_id": 1, "row": 1, "number": 1},
    {"id": 6, "hall_id": 1, "row": 1, "number": 2},
    {"id": 7, "hall_id": 1, "row": 2, "number": 1},
    {"id": 8, "hall_id": 1, "row": 2, "number": 2},
]

USER = {"id": 1, "name": "Алия", "email": "aliya@example.com", "is_admin": False}
ADMIN = {"id": 2, "name": "Admin", "email": "admin@example.com", "is_admin": True}

HALLS = [{"id": 1, "name": "Зал 1", "rows": 2, "cols": 2}, {"id": 2, "name": "Зал 2", "rows": 8, "cols": 12}]


def booking(booking_id=100, seat_ids=(7,), status="confirmed", total_price=450):
    return {
        "id": booking_id,
        "session_id": 10,
        "status": status,
        "total_price": total_price,
        "payment_method": "card",
        "created_at": "2026-10-19T12:00:00Z",
        "seats": [seat for seat in SEATS_HALL_1 if seat["id"] in seat_ids],
    }


@pytest.fixture(autouse=True)
def action_log(tmp_path, monkeypatch):
    path = tmp_path / "user_actions.log"
    monkeypatch.setattr(logging_service, "LOG_FILE", path)
    return path


@pytest.fixture
def http():
    fake = FakeHttp()
    fake.add("GET", "/movies", MOVIES)
    fake.add("GET", "/sessions?movie_id=3", SESSIONS)
    fake.add("GET", "/sessions?movie_id=4", [])
    fake.add("GET", "/sessions", SESSIONS)
    fake.add("GET", "/halls", HALLS)
    fake.add("GET", "/halls/1/seats", SEATS_HALL_1)
    fake.add("GET", "/halls/2/seats", [])
    fake.add("GET", "/sessions/10/availability", {"booked_seat_ids": [5, 6]})
    fake.add("GET", "/sessions/11/availability", {"booked_seat_ids": []})
    return fake


@pytest.fixture
def api(http):
    return ApiClient(base_url=BASE_URL, timeout=1, http=http)


@pytest.fixture
def store(tmp_path):
    return LocalStore(str(tmp_path / "state.json"))


@pytest.fixture
def frontend(api, store, tmp_path):
    return Frontend(api=api, store=store, download_dir=str(tmp_path / "downloads"))


@pytest.fixture
def signed_in(frontend, http):
    """Клиент с выбранным сеансом 10 и вошедшим пользователем"""
    frontend.state.token = "token-1"
    http.add("GET", "/me", USER)
    frontend.state.user = frontend.api.fetch_me("token-1")
    frontend.workflow.load_movies()
    frontend.workflow.select_session(10)
    http.calls.clear()
    return frontend
