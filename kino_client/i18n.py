# i18n.py

from datetime import datetime
from typing import Dict

LANG_RU: Dict[str, str] = {
    "guest": "Гость",
    "status_cancelled": "Отменено",
    "status_confirmed": "Подтверждено",
    "duration_unit": "мин",
    "seat_row_abbr": "Р",
    "seat_seat_abbr": "М",

    "flash_account_created": "Аккаунт создан.",
    "flash_logged_in": "Вы вошли в профиль.",
    "flash_auth_error": "Ошибка авторизации",
    "flash_profile_saved": "Профиль сохранен.",
    "flash_profile_save_failed": "Не удалось сохранить профиль",
    "flash_password_changed": "Пароль изменен.",
    "flash_password_change_failed": "Не удалось изменить пароль",
    "flash_login_required": "Войдите, чтобы забронировать места.",
    "flash_select_seats": "Выберите места для бронирования.",
    "flash_booking_confirmed": "Бронирование подтверждено.",
    "flash_booking_failed": "Не удалось забронировать",
    "flash_booking_cancelled": "Бронирование отменено.",
    "flash_cancel_failed": "Не удалось отменить",
    "flash_ticket_failed": "Не удалось скачать билет",
    "flash_qr_failed": "Не удалось получить QR",
    "flash_load_failed": "Не удалось загрузить данные",
    "flash_movie_saved": "Фильм сохранен.",
    "flash_movie_save_failed": "Не удалось сохранить фильм",
    "flash_movie_deleted": "Фильм удален.",
    "flash_movie_delete_failed": "Не удалось удалить фильм",
    "flash_hall_saved": "Зал сохранен.",
    "flash_hall_save_failed": "Не удалось сохранить зал",
    "flash_hall_deleted": "Зал удален.",
    "flash_hall_delete_failed": "Не удалось удалить зал",
    "flash_session_missing": "Заполните фильм, зал и дату сеанса.",
    "flash_session_saved": "Сеанс сохранен.",
    "flash_session_save_failed": "Не удалось сохранить сеанс",
    "flash_session_deleted": "Сеанс удален.",
    "flash_session_delete_failed": "Не удалось удалить сеанс",
    "flash_booking_status_saved": "Статус бронирования обновлен.",
    "flash_booking_status_failed": "Не удалось обновить статус",
}

LANG_EN: Dict[str, str] = {
    "guest": "Guest",
    "status_cancelled": "Cancelled",
    "status_confirmed": "Confirmed",
    "duration_unit": "min",
    "seat_row_abbr": "R",
    "seat_seat_abbr": "S",

    "flash_account_created": "Account created.",
    "flash_logged_in": "Signed in.",
    "flash_auth_error": "Authorization error",
    "flash_profile_saved": "Profile saved.",
    "flash_profile_save_failed": "Unable to save profile",
    "flash_password_changed": "Password changed.",
    "flash_password_change_failed": "Unable to change password",
    "flash_login_required": "Sign in to book seats.",
    "flash_select_seats": "Choose seats to book.",
    "flash_booking_confirmed": "Booking confirmed.",
    "flash_booking_failed": "Unable to book",
    "flash_booking_cancelled": "Booking cancelled.",
    "flash_cancel_failed": "Unable to cancel",
    "flash_ticket_failed": "Unable to download ticket",
    "flash_qr_failed": "Unable to get QR",
    "flash_load_failed": "Unable to load data",
    "flash_movie_saved": "Movie saved.",
    "flash_movie_save_failed": "Unable to save movie",
    "flash_movie_deleted": "Movie deleted.",
    "flash_movie_delete_failed": "Unable to delete movie",
    "flash_hall_saved": "Hall saved.",
    "flash_hall_save_failed": "Unable to save hall",
    "flash_hall_deleted": "Hall deleted.",
    "flash_hall_delete_failed": "Unable to delete hall",
    "flash_session_missing": "Fill movie, hall, and session date.",
    "flash_session_saved": "Session saved.",
    "flash_session_save_failed": "Unable to save session",
    "flash_session_deleted": "Session deleted.",
    "flash_session_delete_failed": "Unable to delete session",
    "flash_booking_status_saved": "Booking status updated.",
    "flash_booking_status_failed": "Unable to update booking status",
}

LANG_KK: Dict[str, str] = {
    "guest": "Қонақ",
    "status_cancelled": "Бас тартылды",
    "status_confirmed": "Расталды",
    "duration_unit": "мин",
    "seat_row_abbr": "Қ",
    "seat_seat_abbr": "О",

    "flash_account_created": "Аккаунт құрылды.",
    "flash_logged_in": "Профильге кірдіңіз.",
    "flash_auth_error": "Авторизация қатесі",
    "flash_login_required": "Орындарды брондау үшін кіріңіз.",
    "flash_select_seats": "Брондау үшін орындарды таңдаңыз.",
    "flash_booking_confirmed": "Брондау расталды.",
    "flash_booking_failed": "Брондау мүмкін емес",
    "flash_booking_cancelled": "Брондау тоқтатылды.",
    "flash_cancel_failed": "Бас тарту мүмкін емес",
    "flash_ticket_failed": "Билетті жүктеу мүмкін емес",
    "flash_qr_failed": "QR алу мүмкін емес",
    "flash_movie_saved": "Фильм сақталды.",
    "flash_movie_save_failed": "Фильмді сақтау мүмкін емес",
    "flash_movie_deleted": "Фильм жойылды.",
    "flash_movie_delete_failed": "Фильмді жою мүмкін емес",
    "flash_hall_saved": "Зал сақталды.",
    "flash_hall_save_failed": "Залды сақтау мүмкін емес",
    "flash_hall_deleted": "Зал жойылды.",
    "flash_hall_delete_failed": "Залды жою мүмкін емес",
    "flash_session_missing": "Фильм, зал және сеанс күнін толтырыңыз.",
    "flash_session_saved": "Сеанс сақталды.",
    "flash_session_save_failed": "Сеансты сақтау мүмкін емес",
    "flash_session_deleted": "Сеанс жойылды.",
    "flash_session_delete_failed": "Сеансты жою мүмкін емес",
}

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "ru": LANG_RU,
    "en": LANG_EN,
    "kk": LANG_KK,
}

LANGUAGES = tuple(TRANSLATIONS)


def t(lang: str, key: str) -> str:
    """Строка для языка; если перевода нет - русская, затем сам ключ"""
    table = TRANSLATIONS.get(lang, LANG_RU)
    return table.get(key) or LANG_RU.get(key) or key


def plural_ru(value: int, one: str, few: str, many: str) -> str:
    mod10 = value % 10
    mod100 = value % 100
    if mod10 == 1 and mod100 != 11:
        return one
    if 2 <= mod10 <= 4 and (mod100 < 12 or mod100 > 14):
        return few
    return many


def format_movie_count(value: int, lang: str) -> str:
    if lang == "en":
        return f"{value} {'movie' if value == 1 else 'movies'}"
    if lang == "kk":
        return f"{value} {'фильм' if value == 1 else 'фильмдер'}"
    return f"{value} {plural_ru(value, 'фильм', 'фильма', 'фильмов')}"


def format_session_count(value: int, lang: str) -> str:
    if lang == "en":
        return f"{value} {'session' if value == 1 else 'sessions'}"
    if lang == "kk":
        return f"{value} {'сеанс' if value == 1 else 'сеанстар'}"
    return f"{value} {plural_ru(value, 'сеанс', 'сеанса', 'сеансов')}"


def format_duration(value: int, lang: str) -> str:
    return f"{value} {t(lang, 'duration_unit')}"


def format_price(value: int, lang: str) -> str:
    """Цена в тенге без копеек"""
    if lang == "en":
        return f"KZT {value:,}"
    return f"{value:,}".replace(",", "\u00a0") + "\u00a0₸"


def format_time(value: str, lang: str) -> str:
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if lang == "en":
        return moment.strftime("%b %d, %H:%M")
    return moment.strftime("%d.%m %H:%M")
