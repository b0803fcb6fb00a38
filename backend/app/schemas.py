from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from study_seats.chart import RenderSlot, SeatSlot
from study_seats.layout import ZoneLayoutDefinition
from study_seats.models import Reservation, ReservationStatus, Seat, SeatingChartError
from study_seats.occupancy import ColorKey, Mode, Status


class SeatIn(BaseModel):
    id: str = Field(min_length=1)
    zone: str
    grade: int
    number: int = Field(ge=1)

    def to_seat(self) -> Seat:
        return Seat(id=self.id, zone=self.zone, grade=self.grade, number=self.number)


class ReservationIn(BaseModel):
    seat_id: str
    date: dt.date
    status: ReservationStatus

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, v: object) -> ReservationStatus:
        # Legacy Korean labels are accepted as well as the canonical values.
        try:
            return ReservationStatus.parse(v)  # type: ignore[arg-type]
        except SeatingChartError as e:
            raise ValueError(str(e)) from e

    def to_reservation(self) -> Reservation:
        return Reservation(seat_id=self.seat_id, date=self.date, status=self.status)


class RenderRequest(BaseModel):
    grade: int
    date: dt.date
    mode: Mode = Mode.view
    selected_seat_id: Optional[str] = None
    # Omitted seats mean the catalog loaded at startup.
    seats: Optional[list[SeatIn]] = None
    reservations: list[ReservationIn] = Field(default_factory=list)


class SummaryRequest(BaseModel):
    date: dt.date
    zone: Optional[str] = None
    seats: Optional[list[SeatIn]] = None
    reservations: list[ReservationIn] = Field(default_factory=list)


class GapSlotOut(BaseModel):
    kind: Literal["gap"] = "gap"


class SeatSlotOut(BaseModel):
    kind: Literal["seat"] = "seat"
    seat_id: str
    number: int
    status: Status
    selectable: bool
    selected: bool
    color: ColorKey


RenderSlotOut = Annotated[Union[GapSlotOut, SeatSlotOut], Field(discriminator="kind")]


def slot_out(slot: RenderSlot) -> Union[GapSlotOut, SeatSlotOut]:
    if isinstance(slot, SeatSlot):
        return SeatSlotOut(
            seat_id=slot.seat.id,
            number=slot.seat.number,
            status=slot.status,
            selectable=slot.selectable,
            selected=slot.selected,
            color=slot.color,
        )
    return GapSlotOut()


class LayoutOut(BaseModel):
    zone: str
    grade: int
    title: str
    columns: int
    # Seat number per slot; null marks a gap.
    slots: list[Optional[int]]

    @classmethod
    def from_definition(cls, d: ZoneLayoutDefinition) -> "LayoutOut":
        return cls(**d.to_dict())


class ZoneRender(BaseModel):
    zone: str
    grade: int
    title: str
    columns: int
    slots: list[RenderSlotOut]


class SeatStateOut(BaseModel):
    seat_id: str
    date: dt.date
    status: Status
    selectable: bool
    color: ColorKey


class LegendEntry(BaseModel):
    status: Status
    color: ColorKey


class SummaryOut(BaseModel):
    date: dt.date
    zone: Optional[str] = None
    seats_total: int
    counts: dict[Status, int]
