from pydantic import BaseModel
from typing import List, Optional
from enum import Enum


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class UserSchema(BaseModel):
    id: int
    name: str
    email: str
    is_admin: bool = False
    avatar_url: Optional[str] = None


class MovieSchema(BaseModel):
    id: int
    title: str
    title_en: Optional[str] = None
    title_kk: Optional[str] = None
    description: str = ""
    description_en: Optional[str] = None
    description_kk: Optional[str] = None
    duration_mins: int
    poster_url: str = ""
    country: Optional[str] = None
    country_en: Optional[str] = None
    country_kk: Optional[str] = None
    genres: Optional[str] = None
    genres_en: Optional[str] = None
    genres_kk: Optional[str] = None
    release_year: Optional[int] = None


class HallSchema(BaseModel):
    id: int
    name: str
    rows: int
    cols: int


class SessionSchema(BaseModel):
    id: int
    movie_id: int
    hall_id: int
    start_time: str
    base_price: int
    movie: Optional[MovieSchema] = None
    hall: Optional[HallSchema] = None


class SeatSchema(BaseModel):
    id: int
    hall_id: int
    row: int
    number: int


class BookingSchema(BaseModel):
    id: int
    session_id: int
    status: BookingStatus
    total_price: int
    payment_method: Optional[str] = None
    created_at: str
    session: Optional[SessionSchema] = None
    seats: List[SeatSchema] = []


class AvailabilitySchema(BaseModel):
    booked_seat_ids: List[int] = []


class AuthResultSchema(BaseModel):
    token: str
    user: UserSchema


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class CreateBookingRequest(BaseModel):
    session_id: int
    seat_ids: List[int]
    payment_method: str = "card"


class BookingStatusRequest(BaseModel):
    status: BookingStatus


class CreateMovieSchema(BaseModel):
    title: str
    title_en: Optional[str] = None
    title_kk: Optional[str] = None
    description: str
    description_en: Optional[str] = None
    description_kk: Optional[str] = None
    duration_mins: int
    poster_url: str
    country: Optional[str] = None
    country_en: Optional[str] = None
    country_kk: Optional[str] = None
    genres: Optional[str] = None
    genres_en: Optional[str] = None
    genres_kk: Optional[str] = None
    release_year: Optional[int] = None


class UpdateMovieSchema(BaseModel):
    title: Optional[str] = None
    title_en: Optional[str] = None
    title_kk: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    description_kk: Optional[str] = None
    duration_mins: Optional[int] = None
    poster_url: Optional[str] = None
    country: Optional[str] = None
    country_en: Optional[str] = None
    country_kk: Optional[str] = None
    genres: Optional[str] = None
    genres_en: Optional[str] = None
    genres_kk: Optional[str] = None
    release_year: Optional[int] = None


class CreateHallSchema(BaseModel):
    name: str
    rows: int
    cols: int


class UpdateHallSchema(BaseModel):
    # Ряды и места после создания не меняются
    name: str


class CreateSessionSchema(BaseModel):
    movie_id: int
    hall_id: int
    start_time: str
    base_price: int


class UpdateSessionSchema(BaseModel):
    movie_id: Optional[int] = None
    hall_id: Optional[int] = None
    start_time: Optional[str] = None
    base_price: Optional[int] = None


# Тела запросов к слою представления

class LoginForm(BaseModel):
    email: str
    password: str


class RegisterForm(BaseModel):
    name: str
    email: str
    password: str


class BookingForm(BaseModel):
    payment_method: str = "card"


class PreferencesForm(BaseModel):
    lang: Optional[str] = None
    theme: Optional[str] = None


class ProfileForm(BaseModel):
    name: str


class PasswordForm(BaseModel):
    current_password: str
    new_password: str


class MovieForm(BaseModel):
    title: str = ""
    description: str = ""
    duration: int = 90
    poster: str = ""


class HallForm(BaseModel):
    name: str = ""
    rows: int = 8
    cols: int = 12


class SessionForm(BaseModel):
    movie_id: int = 0
    hall_id: int = 0
    start: str = ""
    price: int = 450


class BookingStatusForm(BaseModel):
    status: BookingStatus
