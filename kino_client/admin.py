from datetime import datetime, timezone

from kino_client.controller import BaseController
from kino_client.errors import ApiError
from kino_client.logger import logger
from kino_client.logging_service import log_action
from kino_client.models import AdminTab
from kino_client.schemas import (
    BookingStatus, CreateHallSchema, CreateMovieSchema, CreateSessionSchema, HallForm, MovieForm,
    SessionForm, UpdateHallSchema, UpdateMovieSchema, UpdateSessionSchema,
)


def to_rfc3339(local_value: str) -> str:
    """Время из формы (локальное, если без пояса) -> RFC 3339 в UTC"""
    moment = datetime.fromisoformat(local_value)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def to_local_input(value: str) -> str:
    """RFC 3339 -> значение для поля формы в локальном времени"""
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return moment.astimezone().strftime("%Y-%m-%dT%H:%M")


class AdminPanel(BaseController):
    """Админка: фильмы, залы, сеансы, статусы бронирований"""

    def _allowed(self) -> bool:
        if not self.state.token or not self.state.is_admin:
            self.state.error(self.t("flash_auth_error"))
            return False
        return True

    def _log(self, action: str, details: dict):
        log_action(action=action, user_id=self.state.user.email, details=details)

    def load(self):
        """Загрузить залы и все сеансы, заполнить форму сеанса значениями по умолчанию"""
        if not self.state.token or not self.state.is_admin:
            return
        admin = self.state.admin
        with self.busy():
            try:
                halls, sessions = self.fetch_together(self.api.fetch_halls, self.api.fetch_sessions)
            except ApiError as e:
                self.fail(e, "flash_load_failed")
                return
        admin.halls = halls
        admin.sessions = sessions
        if halls and admin.session_form.hall_id == 0:
            admin.session_form.hall_id = halls[0].id
        if self.state.movies and admin.session_form.movie_id == 0:
            admin.session_form.movie_id = self.state.movies[0].id

    def show(self, visible: bool = True):
        admin = self.state.admin
        admin.visible = visible and self.state.is_admin
        if admin.visible:
            admin.tab = AdminTab.MOVIES

    def select_tab(self, tab: AdminTab):
        self.state.admin.tab = AdminTab(tab)

    # Фильмы

    def start_edit_movie(self, movie_id: int):
        movie = next((m for m in self.state.movies if m.id == movie_id), None)
        if movie is None:
            raise KeyError(f"Movie {movie_id} not found")
        admin = self.state.admin
        admin.editing_movie_id = movie.id
        admin.movie_form = MovieForm(
            title=movie.title,
            description=movie.description,
            duration=movie.duration_mins,
            poster=movie.poster_url
        )

    def submit_movie(self, form: MovieForm) -> bool:
        if not self._allowed():
            return False
        admin = self.state.admin
        admin.movie_form = form
        with self.busy():
            try:
                if admin.editing_movie_id:
                    self.api.admin_update_movie(self.state.token, admin.editing_movie_id, UpdateMovieSchema(
                        title=form.title,
                        description=form.description,
                        duration_mins=form.duration,
                        poster_url=form.poster
                    ))
                else:
                    self.api.admin_create_movie(self.state.token, CreateMovieSchema(
                        title=form.title,
                        description=form.description,
                        duration_mins=form.duration,
                        poster_url=form.poster
                    ))
                movies = self.api.fetch_movies()
            except ApiError as e:
                self.fail(e, "flash_movie_save_failed")
                return False

        self._log("ADMIN_SAVE_MOVIE", {"movie_id": admin.editing_movie_id, "title": form.title})
        self.state.movies = movies
        admin.movie_form = MovieForm()
        admin.editing_movie_id = None
        self.state.success(self.t("flash_movie_saved"))
        return True

    def delete_movie(self, movie_id: int) -> bool:
        if not self._allowed():
            return False
        with self.busy():
            try:
                self.api.admin_delete_movie(self.state.token, movie_id)
                movies = self.api.fetch_movies()
            except ApiError as e:
                self.fail(e, "flash_movie_delete_failed")
                return False
        self._log("ADMIN_DELETE_MOVIE", {"movie_id": movie_id})
        self.state.movies = movies
        self.state.success(self.t("flash_movie_deleted"))
        return True

    # Залы

    def start_edit_hall(self, hall_id: int):
        hall = next((h for h in self.state.admin.halls if h.id == hall_id), None)
        if hall is None:
            raise KeyError(f"Hall {hall_id} not found")
        admin = self.state.admin
        admin.editing_hall_id = hall.id
        admin.hall_form = HallForm(name=hall.name, rows=hall.rows, cols=hall.cols)

    def submit_hall(self, form: HallForm) -> bool:
        if not self._allowed():
            return False
        admin = self.state.admin
        if admin.editing_hall_id:
            # Размеры зала после создания не меняются
            form = HallForm(name=form.name, rows=admin.hall_form.rows, cols=admin.hall_form.cols)
        admin.hall_form = form
        with self.busy():
            try:
                if admin.editing_hall_id:
                    self.api.admin_update_hall(self.state.token, admin.editing_hall_id, UpdateHallSchema(name=form.name))
                else:
                    self.api.admin_create_hall(self.state.token, CreateHallSchema(
                        name=form.name,
                        rows=form.rows,
                        cols=form.cols
                    ))
                halls = self.api.fetch_halls()
            except ApiError as e:
                self.fail(e, "flash_hall_save_failed")
                return False

        self._log("ADMIN_SAVE_HALL", {"hall_id": admin.editing_hall_id, "name": form.name})
        admin.halls = halls
        admin.hall_form = HallForm()
        admin.editing_hall_id = None
        self.state.success(self.t("flash_hall_saved"))
        return True

    def delete_hall(self, hall_id: int) -> bool:
        if not self._allowed():
            return False
        with self.busy():
            try:
                self.api.admin_delete_hall(self.state.token, hall_id)
                halls = self.api.fetch_halls()
            except ApiError as e:
                self.fail(e, "flash_hall_delete_failed")
                return False
        self._log("ADMIN_DELETE_HALL", {"hall_id": hall_id})
        self.state.admin.halls = halls
        self.state.success(self.t("flash_hall_deleted"))
        return True

    # Сеансы

    def start_edit_session(self, session_id: int):
        session = next((s for s in self.state.admin.sessions if s.id == session_id), None)
        if session is None:
            raise KeyError(f"Session {session_id} not found")
        admin = self.state.admin
        admin.editing_session_id = session.id
        admin.session_form = SessionForm(
            movie_id=session.movie_id,
            hall_id=session.hall_id,
            start=to_local_input(session.start_time),
            price=session.base_price
        )

    def submit_session(self, form: SessionForm) -> bool:
        if not self._allowed():
            return False
        admin = self.state.admin
        admin.session_form = form
        if not form.start or not form.movie_id or not form.hall_id:
            self.state.error(self.t("flash_session_missing"))
            return False

        try:
            start_time = to_rfc3339(form.start)
        except ValueError:
            logger.warning(f"Invalid session start time: {form.start}")
            self.state.error(self.t("flash_session_missing"))
            return False

        with self.busy():
            try:
                if admin.editing_session_id:
                    self.api.admin_update_session(self.state.token, admin.editing_session_id, UpdateSessionSchema(
                        movie_id=form.movie_id,
                        hall_id=form.hall_id,
                        start_time=start_time,
                        base_price=form.price
                    ))
                else:
                    self.api.admin_create_session(self.state.token, CreateSessionSchema(
                        movie_id=form.movie_id,
                        hall_id=form.hall_id,
                        start_time=start_time,
                        base_price=form.price
                    ))
                sessions = self.api.fetch_sessions()
            except ApiError as e:
                self.fail(e, "flash_session_save_failed")
                return False

        self._log("ADMIN_SAVE_SESSION", {"session_id": admin.editing_session_id, "start_time": start_time})
        admin.sessions = sessions
        admin.session_form = SessionForm()
        admin.editing_session_id = None
        self.state.success(self.t("flash_session_saved"))
        return True

    def delete_session(self, session_id: int) -> bool:
        if not self._allowed():
            return False
        with self.busy():
            try:
                self.api.admin_delete_session(self.state.token, session_id)
                sessions = self.api.fetch_sessions()
            except ApiError as e:
                self.fail(e, "flash_session_delete_failed")
                return False
        self._log("ADMIN_DELETE_SESSION", {"session_id": session_id})
        self.state.admin.sessions = sessions
        self.state.success(self.t("flash_session_deleted"))
        return True

    # Бронирования

    def update_booking_status(self, booking_id: int, status: BookingStatus):
        if not self._allowed():
            return None
        with self.busy():
            try:
                booking = self.api.admin_update_booking_status(self.state.token, booking_id, BookingStatus(status))
            except ApiError as e:
                self.fail(e, "flash_booking_status_failed")
                return None
            self.refresh_bookings()
        self._log("ADMIN_BOOKING_STATUS", {"booking_id": booking_id, "status": booking.status.value})
        self.state.success(self.t("flash_booking_status_saved"))
        return booking
