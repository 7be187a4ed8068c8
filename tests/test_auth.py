import pytest

from kino_client.config import LANG_KEY, THEME_KEY, TOKEN_KEY
from kino_client.frontend import Frontend
from kino_client.models import FlashType
from kino_client.storage import LocalStore

from conftest import ADMIN, USER, booking


def test_restore_with_expired_token_signs_out(frontend, http, store):
    store.set(TOKEN_KEY, "expired")
    http.add("GET", "/me", {"error": "invalid token"}, status=401)

    assert frontend.auth.restore() is False

    assert frontend.state.token is None
    assert frontend.state.user is None
    assert store.get(TOKEN_KEY) is None
    assert LocalStore(store.path).get(TOKEN_KEY) is None
    assert frontend.state.flash is None


def test_restore_with_valid_token_loads_profile_and_bookings(frontend, http, store):
    store.set(TOKEN_KEY, "good")
    http.add("GET", "/me", USER)
    http.add("GET", "/bookings/mine", [booking()])

    assert frontend.auth.restore() is True

    assert frontend.state.token == "good"
    assert frontend.state.user.name == USER["name"]
    assert [b.id for b in frontend.state.bookings] == [100]
    assert http.last("GET", "/bookings/mine").headers["Authorization"] == "Bearer good"


def test_restore_without_token_does_nothing(frontend, http):
    assert frontend.auth.restore() is False
    assert http.calls == []


def test_login_persists_token(frontend, http, store):
    http.add("POST", "/auth/login", {"token": "fresh", "user": USER})
    http.add("GET", "/bookings/mine", [])

    assert frontend.login("aliya@example.com", "secret") is True

    assert store.get(TOKEN_KEY) == "fresh"
    assert frontend.state.flash.message == "Вы вошли в профиль."
    assert http.last("POST", "/auth/login").json == {"email": "aliya@example.com", "password": "secret"}


def test_login_failure_shows_server_message(frontend, http, store):
    http.add("POST", "/auth/login", {"error": "invalid credentials"}, status=401)

    assert frontend.login("aliya@example.com", "wrong") is False

    assert frontend.state.token is None
    assert store.get(TOKEN_KEY) is None
    assert frontend.state.flash.type == FlashType.ERROR
    assert frontend.state.flash.message == "invalid credentials"


def test_register_as_admin_loads_admin_data(frontend, http):
    http.add("POST", "/auth/register", {"token": "t", "user": ADMIN}, status=201)
    http.add("GET", "/bookings/mine", [])
    frontend.workflow.load_movies()

    assert frontend.register("Admin", "admin@example.com", "secret") is True

    assert frontend.state.is_admin
    assert [h.id for h in frontend.state.admin.halls] == [1, 2]
    assert frontend.state.admin.session_form.hall_id == 1
    assert frontend.state.admin.session_form.movie_id == 3
    assert frontend.state.flash.message == "Аккаунт создан."


def test_logout_clears_state_without_network(frontend, http, store):
    store.set(TOKEN_KEY, "t")
    frontend.state.token = "t"
    frontend.state.user = None
    frontend.state.admin.visible = True
    http.calls.clear()

    frontend.logout()

    assert http.calls == []
    assert frontend.state.token is None
    assert frontend.state.admin.visible is False
    assert store.get(TOKEN_KEY) is None


def test_preferences_are_persisted_and_reapplied(frontend, store):
    frontend.auth.set_language("kk")
    frontend.auth.set_theme("dark")
    assert store.get(LANG_KEY) == "kk"
    assert store.get(THEME_KEY) == "dark"

    other = Frontend(api=frontend.api, store=LocalStore(store.path))
    other.auth.load_preferences()
    assert other.state.lang == "kk"
    assert other.state.theme == "dark"


def test_invalid_preferences_are_rejected(frontend):
    with pytest.raises(ValueError):
        frontend.auth.set_language("de")
    with pytest.raises(ValueError):
        frontend.auth.set_theme("neon")
    assert frontend.state.lang == "ru"
    assert frontend.state.theme == "light"


def test_update_profile(frontend, http):
    frontend.state.token = "t"
    http.add("PATCH", "/me", dict(USER, name="Алия Н."))
    assert frontend.auth.update_profile("Алия Н.") is True
    assert frontend.state.user.name == "Алия Н."
    assert http.last("PATCH", "/me").json == {"name": "Алия Н."}


def test_change_password_failure(frontend, http):
    frontend.state.token = "t"
    http.add("PATCH", "/me/password", {"error": "current password is incorrect"}, status=400)
    assert frontend.auth.change_password("old", "newpass") is False
    assert frontend.state.flash.message == "current password is incorrect"
