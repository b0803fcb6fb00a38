from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Iterable, Optional, Union

from .models import Reservation, ReservationStatus, Seat, SeatingChartError, as_date


class Status(str, Enum):
    empty = "empty"
    reserved = "reserved"
    checked_in = "checked-in"
    no_show = "no-show"


class Mode(str, Enum):
    view = "view"
    select = "select"


class ColorKey(str, Enum):
    none = "none"
    reserved = "reserved"
    checked_in = "checked-in"
    no_show = "no-show"
    selected = "selected"
    blocked = "blocked"
    available = "available"


_STATUS_BY_RESERVATION = {
    ReservationStatus.reserved: Status.reserved,
    ReservationStatus.checked_in: Status.checked_in,
    ReservationStatus.no_show: Status.no_show,
}

# Static legend shown next to a view-mode chart.
LEGEND: dict[Status, ColorKey] = {
    Status.empty: ColorKey.none,
    Status.reserved: ColorKey.reserved,
    Status.checked_in: ColorKey.checked_in,
    Status.no_show: ColorKey.no_show,
}


def parse_mode(value: Union[str, Mode]) -> Mode:
    try:
        return Mode(value)
    except ValueError:
        raise SeatingChartError(f"unknown mode: {value!r}") from None


def reservations_on(reservations: Iterable[Reservation], day: Union[str, date]) -> list[Reservation]:
    d = as_date(day)
    return [r for r in reservations if r.date == d]


def active_reservation(seat: Seat, reservations: Iterable[Reservation], day: Union[str, date]) -> Optional[Reservation]:
    """The reservation holding ``seat`` on ``day``, ignoring checked-out ones."""
    d = as_date(day)
    for r in reservations:
        if r.seat_id == seat.id and r.date == d and r.active:
            return r
    return None


def status_of(seat: Seat, reservations: Iterable[Reservation], day: Union[str, date]) -> Status:
    r = active_reservation(seat, reservations, day)
    if r is None:
        return Status.empty
    return _STATUS_BY_RESERVATION[r.status]


def is_selectable(seat: Seat, reservations: Iterable[Reservation], day: Union[str, date], mode: Union[str, Mode]) -> bool:
    if parse_mode(mode) is Mode.view:
        return False
    # A seat vacated for the day (checked out) can be picked again.
    return active_reservation(seat, reservations, day) is None


def color_key(
    seat: Seat,
    reservations: Iterable[Reservation],
    day: Union[str, date],
    mode: Union[str, Mode],
    selected_seat_id: Optional[str] = None,
) -> ColorKey:
    if parse_mode(mode) is Mode.select:
        if seat.id == selected_seat_id:
            return ColorKey.selected
        if active_reservation(seat, reservations, day) is not None:
            return ColorKey.blocked
        return ColorKey.available
    return LEGEND[status_of(seat, reservations, day)]


def summarize(seats: Iterable[Seat], reservations: Iterable[Reservation], day: Union[str, date]) -> dict[Status, int]:
    todays = reservations_on(reservations, day)
    counts = {s: 0 for s in Status}
    for seat in seats:
        counts[status_of(seat, todays, day)] += 1
    return counts
