from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError

from kino_client.config import API_BASE, REQUEST_TIMEOUT
from kino_client.errors import ApiMisconfiguredError, RequestError, TransportError
from kino_client.logger import logger
from kino_client.schemas import (
    AuthResultSchema, AvailabilitySchema, BookingSchema, BookingStatus, BookingStatusRequest,
    ChangePasswordRequest, CreateBookingRequest, CreateHallSchema, CreateMovieSchema,
    CreateSessionSchema, HallSchema, LoginRequest, MovieSchema, RegisterRequest, SeatSchema,
    SessionSchema, UpdateHallSchema, UpdateMovieSchema, UpdateProfileRequest, UpdateSessionSchema,
    UserSchema,
)


def _parse(schema, data, what: str):
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f"Unexpected {what} payload: {e}")
        raise ApiMisconfiguredError(f"API misconfigured: unexpected {what} payload")


def _parse_list(schema, data, what: str) -> list:
    if not isinstance(data, list):
        logger.error(f"Unexpected {what} payload: not an array")
        raise ApiMisconfiguredError(f"API misconfigured: {what} payload is not an array")
    return [_parse(schema, item, what) for item in data]


class ApiClient:
    """HTTP-клиент бэкенда кинотеатра"""

    def __init__(self, base_url: str = API_BASE, timeout: float = REQUEST_TIMEOUT, http=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def _send(self, method: str, path: str, payload: BaseModel = None, token: str = None):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        body = None
        if payload is not None:
            body = payload.model_dump(mode="json", exclude_none=True)

        url = f"{self.base_url}{path}"
        logger.info(f"{method} {path}")
        try:
            return self.http.request(method, url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Backend unavailable: {method} {path}: {e}")
            raise TransportError(f"Network error: {e}")

    def request(self, method: str, path: str, payload: BaseModel = None, token: str = None, expect_json: bool = True):
        """Выполнить запрос и вернуть разобранный JSON"""
        response = self._send(method, path, payload, token)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            if response.ok and not expect_json:
                # DELETE отвечает 204 без тела
                return None
            if not response.ok:
                logger.warning(f"{method} {path} failed with status {response.status_code}")
                raise RequestError(f"Request failed ({response.status_code})", response.status_code)
            logger.error(f"{method} {path} returned {content_type or 'no content type'}")
            raise ApiMisconfiguredError("API misconfigured: expected JSON response")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = "Request failed"
            if isinstance(data, dict) and data.get("error"):
                message = data["error"]
            logger.warning(f"{method} {path} failed with status {response.status_code}: {message}")
            raise RequestError(message, response.status_code)

        return data

    def request_blob(self, path: str, token: str) -> bytes:
        """Получить бинарный ответ (QR, PDF)"""
        response = self._send("GET", path, token=token)
        if not response.ok:
            message = f"Request failed ({response.status_code})"
            if "application/json" in response.headers.get("content-type", ""):
                try:
                    data = response.json()
                except ValueError:
                    data = {}
                if isinstance(data, dict) and data.get("error"):
                    message = data["error"]
            logger.warning(f"GET {path} failed with status {response.status_code}")
            raise RequestError(message, response.status_code)
        return response.content

    # Каталог

    def fetch_movies(self) -> List[MovieSchema]:
        return _parse_list(MovieSchema, self.request("GET", "/movies"), "movies")

    def fetch_sessions(self, movie_id: Optional[int] = None) -> List[SessionSchema]:
        query = f"?movie_id={movie_id}" if movie_id else ""
        return _parse_list(SessionSchema, self.request("GET", f"/sessions{query}"), "sessions")

    def fetch_halls(self) -> List[HallSchema]:
        return _parse_list(HallSchema, self.request("GET", "/halls"), "halls")

    def fetch_seats(self, hall_id: int) -> List[SeatSchema]:
        return _parse_list(SeatSchema, self.request("GET", f"/halls/{hall_id}/seats"), "seats")

    def fetch_availability(self, session_id: int) -> AvailabilitySchema:
        data = self.request("GET", f"/sessions/{session_id}/availability")
        return _parse(AvailabilitySchema, data, "availability")

    # Авторизация и профиль

    def register(self, payload: RegisterRequest) -> AuthResultSchema:
        return _parse(AuthResultSchema, self.request("POST", "/auth/register", payload), "auth")

    def login(self, payload: LoginRequest) -> AuthResultSchema:
        return _parse(AuthResultSchema, self.request("POST", "/auth/login", payload), "auth")

    def fetch_me(self, token: str) -> UserSchema:
        return _parse(UserSchema, self.request("GET", "/me", token=token), "user")

    def update_profile(self, token: str, payload: UpdateProfileRequest) -> UserSchema:
        return _parse(UserSchema, self.request("PATCH", "/me", payload, token), "user")

    def change_password(self, token: str, payload: ChangePasswordRequest) -> dict:
        return self.request("PATCH", "/me/password", payload, token)

    # Бронирования

    def create_booking(self, token: str, payload: CreateBookingRequest) -> BookingSchema:
        return _parse(BookingSchema, self.request("POST", "/bookings", payload, token), "booking")

    def fetch_my_bookings(self, token: str) -> List[BookingSchema]:
        return _parse_list(BookingSchema, self.request("GET", "/bookings/mine", token=token), "bookings")

    def cancel_booking(self, token: str, booking_id: int) -> BookingSchema:
        data = self.request("PATCH", f"/bookings/{booking_id}/cancel", token=token)
        return _parse(BookingSchema, data, "booking")

    def fetch_booking_qr(self, token: str, booking_id: int) -> bytes:
        return self.request_blob(f"/bookings/{booking_id}/qr", token)

    def fetch_booking_ticket(self, token: str, booking_id: int) -> bytes:
        return self.request_blob(f"/bookings/{booking_id}/ticket", token)

    # Администрирование

    def admin_create_movie(self, token: str, payload: CreateMovieSchema) -> MovieSchema:
        return _parse(MovieSchema, self.request("POST", "/admin/movies", payload, token), "movie")

    def admin_update_movie(self, token: str, movie_id: int, payload: UpdateMovieSchema) -> MovieSchema:
        data = self.request("PUT", f"/admin/movies/{movie_id}", payload, token)
        return _parse(MovieSchema, data, "movie")

    def admin_delete_movie(self, token: str, movie_id: int):
        self.request("DELETE", f"/admin/movies/{movie_id}", token=token, expect_json=False)

    def admin_create_hall(self, token: str, payload: CreateHallSchema) -> HallSchema:
        return _parse(HallSchema, self.request("POST", "/admin/halls", payload, token), "hall")

    def admin_update_hall(self, token: str, hall_id: int, payload: UpdateHallSchema) -> HallSchema:
        data = self.request("PUT", f"/admin/halls/{hall_id}", payload, token)
        return _parse(HallSchema, data, "hall")

    def admin_delete_hall(self, token: str, hall_id: int):
        self.request("DELETE", f"/admin/halls/{hall_id}", token=token, expect_json=False)

    def admin_create_session(self, token: str, payload: CreateSessionSchema) -> SessionSchema:
        return _parse(SessionSchema, self.request("POST", "/admin/sessions", payload, token), "session")

    def admin_update_session(self, token: str, session_id: int, payload: UpdateSessionSchema) -> SessionSchema:
        data = self.request("PUT", f"/admin/sessions/{session_id}", payload, token)
        return _parse(SessionSchema, data, "session")

    def admin_delete_session(self, token: str, session_id: int):
        self.request("DELETE", f"/admin/sessions/{session_id}", token=token, expect_json=False)

    def admin_update_booking_status(self, token: str, booking_id: int, status: BookingStatus) -> BookingSchema:
        data = self.request("PATCH", f"/admin/bookings/{booking_id}/status", BookingStatusRequest(status=status), token)
        return _parse(BookingSchema, data, "booking")
