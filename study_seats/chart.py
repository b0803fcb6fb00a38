from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

from .layout import DEFAULT_REGISTRY, Gap, LayoutRegistry, ZoneLayoutDefinition
from .models import Reservation, Seat, SeatingChartError, UnknownSeat
from .occupancy import (
    ColorKey,
    Mode,
    Status,
    color_key,
    is_selectable,
    parse_mode,
    reservations_on,
    status_of,
    summarize,
)


@dataclass(frozen=True)
class GapSlot:
    kind = "gap"

    def to_dict(self) -> dict:
        return {"kind": self.kind}


@dataclass(frozen=True)
class SeatSlot:
    seat: Seat
    status: Status
    selectable: bool
    selected: bool
    color: ColorKey

    kind = "seat"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "seat_id": self.seat.id,
            "number": self.seat.number,
            "status": self.status.value,
            "selectable": self.selectable,
            "selected": self.selected,
            "color": self.color.value,
        }


RenderSlot = Union[GapSlot, SeatSlot]


class SeatingChart:
    """
    Seat catalog bound to a layout registry.

    The catalog is checked against every zone's layout once, on construction;
    rendering afterwards only resolves reservations.
    """

    def __init__(
        self,
        seats: Iterable[Seat],
        registry: LayoutRegistry = DEFAULT_REGISTRY,
        *,
        validate: bool = True,
    ):
        self.registry = registry
        self.seats: tuple[Seat, ...] = tuple(seats)
        self._by_id: dict[str, Seat] = {}
        self._by_number: dict[tuple[str, int], Seat] = {}
        for seat in self.seats:
            if seat.id in self._by_id:
                raise SeatingChartError(f"duplicate seat id: {seat.id}")
            self._by_id[seat.id] = seat
            self._by_number.setdefault((seat.zone, seat.number), seat)
        if validate:
            registry.validate(self.seats)

    def seat(self, seat_id: str) -> Seat:
        try:
            return self._by_id[seat_id]
        except KeyError:
            raise UnknownSeat(seat_id) from None

    def seat_at(self, zone: str, number: int) -> Seat:
        grade = self.registry.get(zone).grade
        seat = self._by_number.get((zone, number))
        if seat is None or seat.grade != grade:
            raise UnknownSeat(f"{zone}-{number}")
        return seat

    def status(self, seat_id: str, reservations: Iterable[Reservation], day: Union[str, date]) -> Status:
        return status_of(self.seat(seat_id), reservations, day)

    def selectable(
        self,
        seat_id: str,
        reservations: Iterable[Reservation],
        day: Union[str, date],
        mode: Union[str, Mode],
    ) -> bool:
        return is_selectable(self.seat(seat_id), reservations, day, mode)

    def color(
        self,
        seat_id: str,
        reservations: Iterable[Reservation],
        day: Union[str, date],
        mode: Union[str, Mode],
        selected_seat_id: Optional[str] = None,
    ) -> ColorKey:
        return color_key(self.seat(seat_id), reservations, day, mode, selected_seat_id)

    def render_slots(
        self,
        zone: str,
        grade: int,
        reservations: Iterable[Reservation],
        day: Union[str, date],
        mode: Union[str, Mode],
        selected_seat_id: Optional[str] = None,
    ) -> list[RenderSlot]:
        mode = parse_mode(mode)
        slots = self.registry.slots(zone, grade)
        if not slots:
            return []
        todays = reservations_on(reservations, day)
        out: list[RenderSlot] = []
        for slot in slots:
            if isinstance(slot, Gap):
                out.append(GapSlot())
                continue
            seat = self.seat_at(zone, slot.number)
            out.append(
                SeatSlot(
                    seat=seat,
                    status=status_of(seat, todays, day),
                    selectable=is_selectable(seat, todays, day, mode),
                    selected=seat.id == selected_seat_id,
                    color=color_key(seat, todays, day, mode, selected_seat_id),
                )
            )
        return out

    def render_grade(
        self,
        grade: int,
        reservations: Iterable[Reservation],
        day: Union[str, date],
        mode: Union[str, Mode],
        selected_seat_id: Optional[str] = None,
    ) -> list[tuple[ZoneLayoutDefinition, list[RenderSlot]]]:
        """Render every zone the given grade may see, in registry order."""
        reservations = list(reservations)
        return [
            (d, self.render_slots(d.zone, grade, reservations, day, mode, selected_seat_id))
            for d in self.registry.visible_zones(grade)
        ]

    def summary(
        self,
        reservations: Iterable[Reservation],
        day: Union[str, date],
        *,
        zone: Optional[str] = None,
    ) -> dict[Status, int]:
        seats = self.seats
        if zone is not None:
            self.registry.get(zone)
            seats = tuple(s for s in seats if s.zone == zone)
        return summarize(seats, reservations, day)


def render_slots(
    zone: str,
    grade: int,
    seats: Iterable[Seat],
    reservations: Iterable[Reservation],
    day: Union[str, date],
    mode: Union[str, Mode],
    selected_seat_id: Optional[str] = None,
    *,
    registry: LayoutRegistry = DEFAULT_REGISTRY,
) -> list[RenderSlot]:
    """One-shot render of a zone; the catalog is assumed to have been validated at startup."""
    chart = SeatingChart(seats, registry, validate=False)
    return chart.render_slots(zone, grade, reservations, day, mode, selected_seat_id)
