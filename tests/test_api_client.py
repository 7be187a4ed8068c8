import pytest
import requests

from kino_client.config import normalize_api_base
from kino_client.errors import ApiMisconfiguredError, RequestError, TransportError
from kino_client.schemas import BookingStatus, CreateBookingRequest, LoginRequest

from conftest import USER, FakeResponse, booking


def test_normalize_api_base():
    assert normalize_api_base(None) == "http://localhost:8080/api"
    assert normalize_api_base("") == "http://localhost:8080/api"
    assert normalize_api_base("https://kino.example.com/") == "https://kino.example.com/api"
    assert normalize_api_base("https://kino.example.com/api/") == "https://kino.example.com/api"


def test_fetch_movies_parses_payload(api, http):
    movies = api.fetch_movies()
    assert [m.id for m in movies] == [3, 4]
    assert movies[0].title_en == "Dune"
    assert movies[1].release_year is None
    call = http.last("GET", "/movies")
    assert "Authorization" not in call.headers
    assert call.json is None


def test_fetch_sessions_without_movie_filter(api, http):
    api.fetch_sessions()
    api.fetch_sessions(3)
    assert http.count("GET", "/sessions") == 1
    assert http.count("GET", "/sessions?movie_id=3") == 1


def test_token_is_sent_as_bearer(api, http):
    http.add("GET", "/me", USER)
    user = api.fetch_me("secret")
    assert user.email == USER["email"]
    assert http.last("GET", "/me").headers["Authorization"] == "Bearer secret"


def test_payload_is_sent_as_json(api, http):
    http.add("POST", "/bookings", booking(seat_ids=(7, 8), total_price=900), status=201)
    result = api.create_booking("t", CreateBookingRequest(session_id=10, seat_ids=[7, 8]))
    assert result.total_price == 900
    assert result.status == BookingStatus.CONFIRMED
    assert http.last("POST", "/bookings").json == {"session_id": 10, "seat_ids": [7, 8], "payment_method": "card"}


def test_error_field_becomes_request_error(api, http):
    http.add("POST", "/auth/login", {"error": "invalid credentials"}, status=401)
    with pytest.raises(RequestError) as exc:
        api.login(LoginRequest(email="a@b.c", password="x"))
    assert exc.value.message == "invalid credentials"
    assert exc.value.status_code == 401


def test_error_without_message_uses_generic_text(api, http):
    http.add("GET", "/movies", {}, status=500)
    with pytest.raises(RequestError) as exc:
        api.fetch_movies()
    assert exc.value.message == "Request failed"


def test_non_json_error_reports_status(api, http):
    http.add("GET", "/movies", None, status=502, content_type="text/html", content=b"<html>Bad gateway</html>")
    with pytest.raises(RequestError) as exc:
        api.fetch_movies()
    assert exc.value.message == "Request failed (502)"


def test_non_json_success_is_misconfiguration(api, http):
    http.add("GET", "/movies", None, status=200, content_type="text/html", content=b"<html></html>")
    with pytest.raises(ApiMisconfiguredError) as exc:
        api.fetch_movies()
    assert exc.value.message == "API misconfigured: expected JSON response"


def test_list_endpoint_rejects_object(api, http):
    http.add("GET", "/halls", {"items": []})
    with pytest.raises(ApiMisconfiguredError) as exc:
        api.fetch_halls()
    assert "not an array" in exc.value.message


def test_wrong_shape_is_misconfiguration(api, http):
    http.add("GET", "/movies", [{"id": "x"}])
    with pytest.raises(ApiMisconfiguredError):
        api.fetch_movies()


def test_transport_failure(api, http):
    http.fail("GET", "/movies", requests.ConnectionError("connection refused"))
    with pytest.raises(TransportError) as exc:
        api.fetch_movies()
    assert "connection refused" in exc.value.message


def test_blob_endpoints_return_bytes(api, http):
    http.routes[("GET", "/bookings/100/qr")] = FakeResponse(200, content_type="image/png", content=b"\x89PNG")
    assert api.fetch_booking_qr("t", 100) == b"\x89PNG"
    assert http.last("GET", "/bookings/100/qr").headers["Authorization"] == "Bearer t"


def test_blob_error_uses_backend_message(api, http):
    http.add("GET", "/bookings/100/ticket", {"error": "booking not found"}, status=404)
    with pytest.raises(RequestError) as exc:
        api.fetch_booking_ticket("t", 100)
    assert exc.value.message == "booking not found"


def test_admin_update_booking_status(api, http):
    http.add("PATCH", "/admin/bookings/100/status", booking(status="cancelled"))
    result = api.admin_update_booking_status("t", 100, BookingStatus.CANCELLED)
    assert result.status == BookingStatus.CANCELLED
    assert http.last("PATCH", "/admin/bookings/100/status").json == {"status": "cancelled"}


def test_delete_accepts_empty_204(api, http):
    http.add("DELETE", "/admin/movies/3", None, status=204, content_type=None)
    assert api.admin_delete_movie("t", 3) is None
    assert http.last("DELETE", "/admin/movies/3").headers["Authorization"] == "Bearer t"


def test_delete_failure_without_json_reports_status(api, http):
    http.add("DELETE", "/admin/halls/2", None, status=500, content_type="text/plain", content=b"oops")
    with pytest.raises(RequestError) as exc:
        api.admin_delete_hall("t", 2)
    assert exc.value.message == "Request failed (500)"


def test_empty_204_still_rejected_where_json_expected(api, http):
    http.add("GET", "/halls", None, status=204, content_type=None)
    with pytest.raises(ApiMisconfiguredError):
        api.fetch_halls()
