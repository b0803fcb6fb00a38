from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Union


class SeatingChartError(Exception):
    pass


class UnknownZone(SeatingChartError):
    def __init__(self, zone: str):
        super().__init__(f"unknown zone: {zone!r}")
        self.zone = zone


class UnknownSeat(SeatingChartError):
    def __init__(self, seat_id: str):
        super().__init__(f"unknown seat: {seat_id!r}")
        self.seat_id = seat_id


class LayoutInconsistency(SeatingChartError):
    """Raised when a zone's declared slots disagree with the seat catalog."""

    def __init__(self, zone: str, detail: str):
        super().__init__(f"zone {zone}: {detail}")
        self.zone = zone
        self.detail = detail


class ReservationStatus(str, Enum):
    reserved = "reserved"
    checked_in = "checked-in"
    no_show = "no-show"
    checked_out = "checked-out"

    @classmethod
    def parse(cls, value: Union[str, "ReservationStatus"]) -> "ReservationStatus":
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        status = _STATUS_ALIASES.get(text) or _STATUS_ALIASES.get(text.lower())
        if status is None:
            raise SeatingChartError(f"unknown reservation status: {value!r}")
        return status


_STATUS_ALIASES: dict[str, ReservationStatus] = {
    **{s.value: s for s in ReservationStatus},
    "checked_in": ReservationStatus.checked_in,
    "no_show": ReservationStatus.no_show,
    "checked_out": ReservationStatus.checked_out,
    # Korean labels found in legacy reservation records.
    "예약": ReservationStatus.reserved,
    "입실완료": ReservationStatus.checked_in,
    "미입실": ReservationStatus.no_show,
    "퇴실완료": ReservationStatus.checked_out,
}


def as_date(value: Union[str, date]) -> date:
    # datetime subclasses date but never compares equal to one.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise SeatingChartError(f"invalid date: {value!r}") from e


@dataclass(frozen=True)
class Seat:
    id: str
    zone: str
    grade: int
    number: int

    def __post_init__(self) -> None:
        if not self.id:
            raise SeatingChartError("seat id must be a non-empty string")
        if self.number <= 0:
            raise SeatingChartError(f"seat {self.id}: number must be a positive integer")

    def to_dict(self) -> dict:
        return {"id": self.id, "zone": self.zone, "grade": self.grade, "number": self.number}

    @classmethod
    def from_dict(cls, data: dict) -> "Seat":
        try:
            return cls(
                id=str(data["id"]),
                zone=str(data["zone"]),
                grade=int(data["grade"]),
                number=int(data["number"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SeatingChartError(f"invalid seat data: {e}") from e


@dataclass(frozen=True)
class Reservation:
    seat_id: str
    date: date
    status: ReservationStatus

    @property
    def active(self) -> bool:
        # A checked-out reservation no longer holds the seat for the day.
        return self.status is not ReservationStatus.checked_out

    def to_dict(self) -> dict:
        return {"seat_id": self.seat_id, "date": self.date.isoformat(), "status": self.status.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Reservation":
        try:
            seat_id = str(data["seat_id"])
            day = data["date"]
            status = data["status"]
        except (KeyError, TypeError) as e:
            raise SeatingChartError(f"invalid reservation data: {e}") from e
        return cls(seat_id=seat_id, date=as_date(day), status=ReservationStatus.parse(status))
