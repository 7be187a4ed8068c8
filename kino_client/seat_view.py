from typing import Dict, Iterable, List, Optional, Tuple

from kino_client.i18n import t
from kino_client.schemas import SeatSchema, SessionSchema


def group_seats_by_row(seats: Iterable[SeatSchema]) -> List[Tuple[int, List[SeatSchema]]]:
    """Сгруппировать места по рядам, ряды по возрастанию"""
    rows: Dict[int, List[SeatSchema]] = {}
    for seat in seats:
        rows.setdefault(seat.row, []).append(seat)
    return sorted(rows.items(), key=lambda item: item[0])


def total_price(session: Optional[SessionSchema], chosen_seat_ids: Iterable[int]) -> int:
    """Предварительная сумма; окончательную считает бэкенд"""
    if session is None:
        return 0
    return session.base_price * len(set(chosen_seat_ids))


def seat_label_map(seats: Iterable[SeatSchema], lang: str) -> Dict[int, str]:
    row_abbr = t(lang, "seat_row_abbr")
    seat_abbr = t(lang, "seat_seat_abbr")
    return {seat.id: f"{row_abbr}{seat.row}-{seat_abbr}{seat.number}" for seat in seats}


def seat_labels(seat_ids: Iterable[int], seats: Iterable[SeatSchema], lang: str) -> List[str]:
    labels = seat_label_map(seats, lang)
    return [labels.get(seat_id, f"#{seat_id}") for seat_id in seat_ids]


def seat_status(seat_id: int, booked_seat_ids, chosen_seat_ids) -> str:
    if seat_id in booked_seat_ids:
        return "booked"
    if seat_id in chosen_seat_ids:
        return "selected"
    return "free"
