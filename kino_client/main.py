from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from kino_client.frontend import Frontend
from kino_client.i18n import format_duration, format_movie_count, format_price, format_session_count, format_time, t
from kino_client.logger import logger
from kino_client.logging_service import get_logs
from kino_client.models import AdminTab
from kino_client.schemas import (
    BookingForm, BookingStatusForm, HallForm, LoginForm, MovieForm, PasswordForm, PreferencesForm,
    ProfileForm, RegisterForm, SessionForm,
)
from kino_client.seat_view import group_seats_by_row, seat_labels, seat_status, total_price


def render_admin(state) -> dict:
    admin = state.admin
    return {
        "visible": admin.visible,
        "tab": admin.tab.value,
        "halls": [hall.model_dump() for hall in admin.halls],
        "sessions": [session.model_dump() for session in admin.sessions],
        "movie_form": admin.movie_form.model_dump(),
        "hall_form": admin.hall_form.model_dump(),
        "session_form": admin.session_form.model_dump(),
        "editing_movie_id": admin.editing_movie_id,
        "editing_hall_id": admin.editing_hall_id,
        "editing_session_id": admin.editing_session_id,
        # Размеры зала редактируются только при создании
        "hall_size_locked": admin.editing_hall_id is not None,
    }


def render_state(frontend: Frontend) -> dict:
    """Текущее состояние клиента вместе с производными значениями для экрана"""
    state = frontend.state
    lang = state.lang
    chosen = sorted(state.chosen_seat_ids)
    total = total_price(state.selected_session, chosen)

    seat_rows = []
    for row, seats in group_seats_by_row(state.seats):
        seat_rows.append({
            "row": row,
            "seats": [
                {
                    "id": seat.id,
                    "number": seat.number,
                    "status": seat_status(seat.id, state.booked_seat_ids, state.chosen_seat_ids),
                }
                for seat in seats
            ],
        })

    return {
        "lang": lang,
        "theme": state.theme,
        "loading": state.loading,
        "stage": state.stage.value,
        "flash": {"type": state.flash.type.value, "message": state.flash.message} if state.flash else None,
        "user": state.user.model_dump() if state.user else None,
        "user_label": state.user.name if state.user else t(lang, "guest"),
        "is_admin": state.is_admin,
        "movies": [
            dict(movie.model_dump(), duration_label=format_duration(movie.duration_mins, lang))
            for movie in state.movies
        ],
        "movie_count": format_movie_count(len(state.movies), lang),
        "selected_movie_id": state.selected_movie.id if state.selected_movie else None,
        "sessions": [
            dict(
                session.model_dump(),
                start_label=format_time(session.start_time, lang),
                price_label=format_price(session.base_price, lang),
            )
            for session in state.sessions
        ],
        "session_count": format_session_count(len(state.sessions), lang),
        "selected_session_id": state.selected_session.id if state.selected_session else None,
        "seat_rows": seat_rows,
        "booked_seat_ids": sorted(state.booked_seat_ids),
        "chosen_seat_ids": chosen,
        "chosen_seat_labels": seat_labels(chosen, state.seats, lang),
        "total_price": total,
        "total_price_label": format_price(total, lang),
        "bookings": [
            dict(booking.model_dump(mode="json"), status_label=t(lang, f"status_{booking.status.value}"))
            for booking in state.bookings
        ],
        "qr": {"booking_id": state.qr_modal.booking_id} if state.qr_modal else None,
        "admin": render_admin(state) if state.is_admin else None,
    }


def create_app(frontend: Frontend = None) -> FastAPI:
    frontend = frontend or Frontend()

    app = FastAPI(
        title="Kino Client",
        docs_url="/docs"
    )
    app.state.frontend = frontend

    # CORS для веб-интерфейса
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    workflow = frontend.workflow
    auth = frontend.auth
    admin = frontend.admin

    # Синхронные обработчики идут в пуле потоков, переходы состояния выполняются по одному
    def locked(action=None):
        with frontend.lock:
            if action is not None:
                action()
            return render_state(frontend)

    @app.on_event("startup")
    def startup():
        with frontend.lock:
            frontend.start()
        logger.info("Kino Client started")

    @app.on_event("shutdown")
    def shutdown():
        with frontend.lock:
            workflow.close_qr()

    @app.get("/state")
    def get_state():
        """Текущее состояние экрана"""
        return locked()

    @app.delete("/flash")
    def dismiss_flash():
        """Скрыть уведомление"""
        return locked(frontend.state.clear_flash)

    @app.put("/preferences")
    def update_preferences(form: PreferencesForm):
        """Сменить язык и/или тему"""
        logger.info(f"PUT /preferences - {form}")

        def apply():
            if form.lang is not None:
                auth.set_language(form.lang)
            if form.theme is not None:
                auth.set_theme(form.theme)

        try:
            return locked(apply)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    # Афиша и бронирование

    @app.post("/movies/reload")
    def reload_movies():
        """Перечитать афишу"""
        logger.info("POST /movies/reload")
        return locked(workflow.load_movies)

    @app.post("/movies/{movie_id}/select")
    def select_movie(movie_id: int):
        """Выбрать фильм"""
        logger.info(f"POST /movies/{movie_id}/select")
        try:
            return locked(lambda: workflow.select_movie(movie_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="Movie not found")

    @app.post("/sessions/{session_id}/select")
    def select_session(session_id: int):
        """Выбрать сеанс"""
        logger.info(f"POST /sessions/{session_id}/select")
        try:
            return locked(lambda: workflow.select_session(session_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="Session not found")

    @app.post("/seats/{seat_id}/toggle")
    def toggle_seat(seat_id: int):
        """Отметить место"""
        try:
            return locked(lambda: workflow.toggle_seat(seat_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="Seat not found")

    @app.post("/bookings")
    def submit_booking(form: BookingForm = None):
        """Забронировать выбранные места"""
        form = form or BookingForm()
        logger.info("POST /bookings")
        return locked(lambda: workflow.submit_booking(form.payment_method))

    @app.post("/bookings/reload")
    def reload_bookings():
        """Перечитать мои бронирования"""
        return locked(workflow.refresh_bookings)

    @app.post("/bookings/{booking_id}/cancel")
    def cancel_booking(booking_id: int):
        """Отменить бронирование"""
        logger.info(f"POST /bookings/{booking_id}/cancel")
        return locked(lambda: workflow.cancel_booking(booking_id))

    @app.post("/bookings/{booking_id}/ticket")
    def download_ticket(booking_id: int):
        """Скачать PDF-билет"""
        logger.info(f"POST /bookings/{booking_id}/ticket")
        with frontend.lock:
            path = workflow.download_ticket(booking_id)
            return dict(render_state(frontend), ticket_path=path)

    @app.post("/bookings/{booking_id}/qr")
    def show_qr(booking_id: int):
        """Открыть QR-код бронирования"""
        logger.info(f"POST /bookings/{booking_id}/qr")
        return locked(lambda: workflow.show_qr(booking_id))

    @app.get("/qr")
    def get_qr():
        """Картинка открытого QR-кода"""
        with frontend.lock:
            modal = frontend.state.qr_modal
            if modal is None:
                raise HTTPException(status_code=404, detail="QR is not open")
            with open(modal.path, "rb") as f:
                content = f.read()
        return Response(content=content, media_type="image/png")

    @app.delete("/qr")
    def close_qr():
        """Закрыть QR-код"""
        return locked(workflow.close_qr)

    # Авторизация и профиль

    @app.post("/auth/login")
    def login(form: LoginForm):
        """Войти"""
        logger.info(f"POST /auth/login - {form.email}")
        return locked(lambda: frontend.login(form.email, form.password))

    @app.post("/auth/register")
    def register(form: RegisterForm):
        """Зарегистрироваться"""
        logger.info(f"POST /auth/register - {form.email}")
        return locked(lambda: frontend.register(form.name, form.email, form.password))

    @app.post("/auth/logout")
    def logout():
        """Выйти"""
        logger.info("POST /auth/logout")
        return locked(frontend.logout)

    @app.patch("/profile")
    def update_profile(form: ProfileForm):
        """Изменить имя"""
        return locked(lambda: auth.update_profile(form.name))

    @app.patch("/profile/password")
    def change_password(form: PasswordForm):
        """Сменить пароль"""
        return locked(lambda: auth.change_password(form.current_password, form.new_password))

    @app.get("/logs")
    def get_action_logs(limit: int = 100):
        """Последние действия пользователей"""
        return get_logs(limit)

    # Админка

    @app.post("/admin/open")
    def open_admin():
        return locked(lambda: admin.show(True))

    @app.post("/admin/close")
    def close_admin():
        return locked(lambda: admin.show(False))

    @app.put("/admin/tab/{tab}")
    def select_admin_tab(tab: AdminTab):
        return locked(lambda: admin.select_tab(tab))

    @app.post("/admin/reload")
    def reload_admin():
        return locked(admin.load)

    @app.post("/admin/movies")
    def save_movie(form: MovieForm):
        """Создать фильм или сохранить редактируемый"""
        logger.info(f"POST /admin/movies - {form.title}")
        return locked(lambda: admin.submit_movie(form))

    @app.post("/admin/movies/{movie_id}/edit")
    def edit_movie(movie_id: int):
        try:
            return locked(lambda: admin.start_edit_movie(movie_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="Movie not found")

    @app.delete("/admin/movies/{movie_id}")
    def delete_movie(movie_id: int):
        logger.info(f"DELETE /admin/movies/{movie_id}")
        return locked(lambda: admin.delete_movie(movie_id))

    @app.post("/admin/halls")
    def save_hall(form: HallForm):
        """Создать зал или переименовать редактируемый"""
        logger.info(f"POST /admin/halls - {form.name}")
        return locked(lambda: admin.submit_hall(form))

    @app.post("/admin/halls/{hall_id}/edit")
    def edit_hall(hall_id: int):
        try:
            return locked(lambda: admin.start_edit_hall(hall_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="Hall not found")

    @app.delete("/admin/halls/{hall_id}")
    def delete_hall(hall_id: int):
        logger.info(f"DELETE /admin/halls/{hall_id}")
        return locked(lambda: admin.delete_hall(hall_id))

    @app.post("/admin/sessions")
    def save_session(form: SessionForm):
        """Создать сеанс или сохранить редактируемый"""
        logger.info(f"POST /admin/sessions - movie {form.movie_id}, hall {form.hall_id}, start {form.start}")
        return locked(lambda: admin.submit_session(form))

    @app.post("/admin/sessions/{session_id}/edit")
    def edit_session(session_id: int):
        try:
            return locked(lambda: admin.start_edit_session(session_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="Session not found")

    @app.delete("/admin/sessions/{session_id}")
    def delete_session(session_id: int):
        logger.info(f"DELETE /admin/sessions/{session_id}")
        return locked(lambda: admin.delete_session(session_id))

    @app.patch("/admin/bookings/{booking_id}/status")
    def update_booking_status(booking_id: int, form: BookingStatusForm):
        logger.info(f"PATCH /admin/bookings/{booking_id}/status - {form.status.value}")
        return locked(lambda: admin.update_booking_status(booking_id, form.status))

    return app


app = create_app()
