import os
import tempfile

from kino_client.config import DOWNLOAD_DIR
from kino_client.controller import BaseController
from kino_client.errors import ApiError
from kino_client.logger import logger
from kino_client.logging_service import log_action
from kino_client.models import QrModal, WorkflowStage
from kino_client.schemas import CreateBookingRequest


class BookingWorkflow(BaseController):
    """Фильм -> сеанс -> места -> бронирование"""

    def __init__(self, state, api, store, download_dir: str = DOWNLOAD_DIR):
        super().__init__(state, api, store)
        self.download_dir = download_dir

    def _find(self, items, item_id: int, what: str):
        for item in items:
            if item.id == item_id:
                return item
        raise KeyError(f"{what} {item_id} not found")

    def _next_generation(self) -> int:
        self.state.generation += 1
        return self.state.generation

    def _is_stale(self, generation: int, what: str) -> bool:
        if generation != self.state.generation:
            logger.info(f"Dropping stale {what} response")
            return True
        return False

    def load_movies(self):
        """Загрузить афишу и выбрать первый фильм"""
        with self.busy():
            try:
                movies = self.api.fetch_movies()
            except ApiError as e:
                self.fail(e, "flash_load_failed")
                return
        self.state.movies = movies
        logger.info(f"Loaded {len(movies)} movies")
        if movies:
            self.select_movie(movies[0].id)

    def select_movie(self, movie_id: int):
        """Выбрать фильм и загрузить его сеансы"""
        state = self.state
        movie = self._find(state.movies, movie_id, "Movie")
        generation = self._next_generation()

        state.selected_movie = movie
        state.selected_session = None
        state.sessions = []
        state.seats = []
        state.booked_seat_ids = set()
        state.chosen_seat_ids = set()
        state.stage = WorkflowStage.MOVIE_SELECTED

        with self.busy():
            try:
                sessions = self.api.fetch_sessions(movie.id)
            except ApiError as e:
                self.fail(e, "flash_load_failed")
                return
        if self._is_stale(generation, "sessions"):
            return
        state.sessions = sessions

    def select_session(self, session_id: int):
        """Выбрать сеанс: сбросить выбранные места, загрузить схему зала и занятость"""
        state = self.state
        session = self._find(state.sessions, session_id, "Session")
        generation = self._next_generation()

        state.selected_session = session
        state.chosen_seat_ids = set()
        state.seats = []
        state.booked_seat_ids = set()
        state.stage = WorkflowStage.SESSION_SELECTED

        with self.busy():
            try:
                seats, availability = self.fetch_together(
                    lambda: self.api.fetch_seats(session.hall_id),
                    lambda: self.api.fetch_availability(session.id),
                )
            except ApiError as e:
                self.fail(e, "flash_load_failed")
                return
        if self._is_stale(generation, "seats"):
            return
        state.seats = seats
        state.booked_seat_ids = set(availability.booked_seat_ids)

    def toggle_seat(self, seat_id: int):
        """Отметить место или снять отметку; занятые места не выбираются"""
        state = self.state
        self._find(state.seats, seat_id, "Seat")
        if seat_id in state.booked_seat_ids:
            return
        if seat_id in state.chosen_seat_ids:
            state.chosen_seat_ids.discard(seat_id)
        else:
            state.chosen_seat_ids.add(seat_id)

        if state.selected_session is not None:
            state.stage = WorkflowStage.SEATS_CHOSEN if state.chosen_seat_ids else WorkflowStage.SESSION_SELECTED

    def submit_booking(self, payment_method: str = "card"):
        """Оформить бронирование выбранных мест"""
        state = self.state
        if not state.token or state.selected_session is None:
            state.error(self.t("flash_login_required"))
            return None
        if not state.chosen_seat_ids:
            state.error(self.t("flash_select_seats"))
            return None

        session = state.selected_session
        generation = state.generation
        request = CreateBookingRequest(
            session_id=session.id,
            seat_ids=sorted(state.chosen_seat_ids),
            payment_method=payment_method,
        )

        state.clear_flash()
        state.stage = WorkflowStage.SUBMITTING
        with self.busy():
            try:
                booking = self.api.create_booking(state.token, request)
            except ApiError as e:
                state.stage = WorkflowStage.FAILED
                self.fail(e, "flash_booking_failed")
                return None

            state.stage = WorkflowStage.CONFIRMED
            state.chosen_seat_ids = set()
            state.success(self.t("flash_booking_confirmed"))
            logger.info(f"Booking {booking.id} created for session {session.id}")
            log_action(
                action="CREATE_BOOKING",
                user_id=state.user.email if state.user else "anonymous",
                details={
                    "booking_id": booking.id,
                    "session_id": session.id,
                    "seat_ids": request.seat_ids,
                    "total_price": booking.total_price,
                    "payment_method": payment_method
                }
            )

            try:
                availability = self.api.fetch_availability(session.id)
            except ApiError as e:
                self.fail(e, "flash_load_failed")
            else:
                if not self._is_stale(generation, "availability"):
                    state.booked_seat_ids = set(availability.booked_seat_ids)
            self.refresh_bookings()
        return booking

    def cancel_booking(self, booking_id: int):
        """Отменить своё бронирование"""
        state = self.state
        if not state.token:
            state.error(self.t("flash_login_required"))
            return None

        state.clear_flash()
        with self.busy():
            try:
                booking = self.api.cancel_booking(state.token, booking_id)
            except ApiError as e:
                self.fail(e, "flash_cancel_failed")
                return None
            if not self.refresh_bookings():
                return booking

        state.success(self.t("flash_booking_cancelled"))
        logger.info(f"Booking {booking_id} cancelled")
        log_action(
            action="CANCEL_BOOKING",
            user_id=state.user.email if state.user else "anonymous",
            details={"booking_id": booking_id}
        )
        return booking

    def download_ticket(self, booking_id: int):
        """Сохранить PDF-билет в папку загрузок"""
        state = self.state
        if not state.token:
            return None
        with self.busy():
            try:
                content = self.api.fetch_booking_ticket(state.token, booking_id)
            except ApiError as e:
                self.fail(e, "flash_ticket_failed")
                return None

        os.makedirs(self.download_dir, exist_ok=True)
        path = os.path.join(self.download_dir, f"booking-{booking_id}.pdf")
        with open(path, "wb") as f:
            f.write(content)
        logger.info(f"Ticket for booking {booking_id} saved to {path}")
        return path

    def show_qr(self, booking_id: int):
        """Открыть QR бронирования; предыдущий QR освобождается"""
        state = self.state
        if not state.token:
            return None
        with self.busy():
            try:
                content = self.api.fetch_booking_qr(state.token, booking_id)
            except ApiError as e:
                self.fail(e, "flash_qr_failed")
                return None

        self.close_qr()
        with tempfile.NamedTemporaryFile(prefix=f"booking-{booking_id}-", suffix=".png", delete=False) as f:
            f.write(content)
        state.qr_modal = QrModal(booking_id=booking_id, path=f.name)
        return state.qr_modal

    def close_qr(self):
        """Закрыть QR и удалить временный файл"""
        modal = self.state.qr_modal
        if modal is None:
            return
        self.state.qr_modal = None
        try:
            os.remove(modal.path)
        except FileNotFoundError:
            logger.warning(f"QR file already removed: {modal.path}")
