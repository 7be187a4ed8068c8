from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from kino_client.config import DEFAULT_LANG, DEFAULT_THEME
from kino_client.schemas import (
    BookingSchema, HallForm, HallSchema, MovieForm, MovieSchema, SeatSchema, SessionForm,
    SessionSchema, UserSchema,
)


class FlashType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class WorkflowStage(str, Enum):
    NO_MOVIE = "NO_MOVIE"
    MOVIE_SELECTED = "MOVIE_SELECTED"
    SESSION_SELECTED = "SESSION_SELECTED"
    SEATS_CHOSEN = "SEATS_CHOSEN"
    SUBMITTING = "SUBMITTING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class AdminTab(str, Enum):
    MOVIES = "movies"
    HALLS = "halls"
    SESSIONS = "sessions"


@dataclass
class Flash:
    type: FlashType
    message: str


@dataclass
class QrModal:
    booking_id: int
    path: str


@dataclass
class AdminState:
    halls: List[HallSchema] = field(default_factory=list)
    sessions: List[SessionSchema] = field(default_factory=list)
    movie_form: MovieForm = field(default_factory=MovieForm)
    hall_form: HallForm = field(default_factory=HallForm)
    session_form: SessionForm = field(default_factory=SessionForm)
    editing_movie_id: Optional[int] = None
    editing_hall_id: Optional[int] = None
    editing_session_id: Optional[int] = None
    visible: bool = False
    tab: AdminTab = AdminTab.MOVIES


@dataclass
class AppState:
    """Всё состояние клиента в одном месте"""
    movies: List[MovieSchema] = field(default_factory=list)
    sessions: List[SessionSchema] = field(default_factory=list)
    selected_movie: Optional[MovieSchema] = None
    selected_session: Optional[SessionSchema] = None
    seats: List[SeatSchema] = field(default_factory=list)
    booked_seat_ids: Set[int] = field(default_factory=set)
    chosen_seat_ids: Set[int] = field(default_factory=set)
    bookings: List[BookingSchema] = field(default_factory=list)
    stage: WorkflowStage = WorkflowStage.NO_MOVIE
    # Растёт при каждом выборе фильма или сеанса; устаревшие ответы отбрасываются
    generation: int = 0

    token: Optional[str] = None
    user: Optional[UserSchema] = None
    lang: str = DEFAULT_LANG
    theme: str = DEFAULT_THEME

    flash: Optional[Flash] = None
    loading: bool = False
    qr_modal: Optional[QrModal] = None
    admin: AdminState = field(default_factory=AdminState)

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    def success(self, message: str):
        self.flash = Flash(type=FlashType.SUCCESS, message=message)

    def error(self, message: str):
        self.flash = Flash(type=FlashType.ERROR, message=message)

    def clear_flash(self):
        self.flash = None
