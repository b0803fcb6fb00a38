from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

from loguru import logger

from .models import LayoutInconsistency, Seat, UnknownZone


GAP_TOKEN = "."


@dataclass(frozen=True)
class SeatRef:
    number: int


@dataclass(frozen=True)
class Gap:
    pass


Slot = Union[SeatRef, Gap]


@dataclass(frozen=True)
class ZoneLayoutDefinition:
    """
    Physical arrangement of one zone as a row-major sequence of slots.

    ``columns`` is the grid width a renderer should wrap at; the slot order is
    the rendering order.
    """

    zone: str
    grade: int
    slots: tuple[Slot, ...]
    columns: int = 0
    title: str = ""

    def __post_init__(self) -> None:
        if self.columns <= 0:
            object.__setattr__(self, "columns", max(1, len(self.slots)))

    @classmethod
    def from_rows(cls, zone: str, grade: int, rows: Sequence[str], *, title: str = "") -> "ZoneLayoutDefinition":
        """
        Build a definition from text rows, one token per grid cell.

        A token is either a seat number or ``.`` for a gap; every row must be
        the same width.
        """
        if not rows:
            raise LayoutInconsistency(zone, "layout has no rows")
        slots: list[Slot] = []
        width: Optional[int] = None
        for i, row in enumerate(rows):
            tokens = row.split()
            if width is None:
                width = len(tokens)
            elif len(tokens) != width:
                raise LayoutInconsistency(zone, f"row {i} has {len(tokens)} cells, expected {width}")
            for tok in tokens:
                slots.append(_parse_token(zone, tok))
        return cls(zone=zone, grade=grade, slots=tuple(slots), columns=width or 1, title=title)

    def seat_numbers(self) -> list[int]:
        return [s.number for s in self.slots if isinstance(s, SeatRef)]

    def gap_count(self) -> int:
        return sum(1 for s in self.slots if isinstance(s, Gap))

    def rows(self) -> list[tuple[Slot, ...]]:
        return [self.slots[i : i + self.columns] for i in range(0, len(self.slots), self.columns)]

    def to_dict(self) -> dict:
        return {
            "zone": self.zone,
            "grade": self.grade,
            "title": self.title,
            "columns": self.columns,
            "slots": [s.number if isinstance(s, SeatRef) else None for s in self.slots],
        }


def _parse_token(zone: str, tok: str) -> Slot:
    if tok == GAP_TOKEN:
        return Gap()
    try:
        number = int(tok)
    except ValueError:
        raise LayoutInconsistency(zone, f"invalid layout token {tok!r}") from None
    if number <= 0:
        raise LayoutInconsistency(zone, f"seat number must be positive, got {number}")
    return SeatRef(number)


@dataclass(frozen=True)
class LayoutRegistry:
    definitions: tuple[ZoneLayoutDefinition, ...]
    _by_zone: dict[str, ZoneLayoutDefinition] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_zone: dict[str, ZoneLayoutDefinition] = {}
        for d in self.definitions:
            if d.zone in by_zone:
                raise LayoutInconsistency(d.zone, "zone is registered more than once")
            by_zone[d.zone] = d
        object.__setattr__(self, "_by_zone", by_zone)

    def zones(self) -> list[str]:
        return [d.zone for d in self.definitions]

    def get(self, zone: str) -> ZoneLayoutDefinition:
        try:
            return self._by_zone[zone]
        except KeyError:
            raise UnknownZone(zone) from None

    def slots(self, zone: str, grade: int) -> tuple[Slot, ...]:
        """Slots of ``zone`` for a viewer of ``grade``; empty when the zone is hidden from that grade."""
        d = self.get(zone)
        if d.grade != grade:
            return ()
        return d.slots

    def visible_zones(self, grade: int) -> list[ZoneLayoutDefinition]:
        return [d for d in self.definitions if d.grade == grade]

    def build_catalog(self) -> list[Seat]:
        """The seat catalog these layouts describe, with ids of the form ``<zone>-<number>``."""
        seats: list[Seat] = []
        for d in self.definitions:
            for n in sorted(d.seat_numbers()):
                seats.append(Seat(id=f"{d.zone}-{n}", zone=d.zone, grade=d.grade, number=n))
        return seats

    def validate(self, seats: Iterable[Seat]) -> None:
        """
        Check that every zone's slots cover exactly the catalog's seats for that zone and grade.

        Raises LayoutInconsistency for the first zone that disagrees, and
        UnknownZone for catalog seats filed under a zone that is not registered.
        """
        by_zone: dict[str, list[Seat]] = {z: [] for z in self._by_zone}
        for seat in seats:
            if seat.zone not in by_zone:
                raise UnknownZone(seat.zone)
            by_zone[seat.zone].append(seat)

        for d in self.definitions:
            try:
                _check_zone(d, by_zone[d.zone])
            except LayoutInconsistency as e:
                logger.error("layout check failed for zone {}: {}", e.zone, e.detail)
                raise
        logger.debug("layouts validated for zones {}", ", ".join(self.zones()))


def _check_zone(d: ZoneLayoutDefinition, seats: list[Seat]) -> None:
    referenced = Counter(d.seat_numbers())
    dup_refs = sorted(n for n, c in referenced.items() if c > 1)
    if dup_refs:
        raise LayoutInconsistency(d.zone, f"seat numbers referenced more than once: {dup_refs}")

    wrong_grade = sorted(s.id for s in seats if s.grade != d.grade)
    if wrong_grade:
        raise LayoutInconsistency(d.zone, f"orphaned seats with grade other than {d.grade}: {wrong_grade}")

    in_catalog = Counter(s.number for s in seats)
    dup_seats = sorted(n for n, c in in_catalog.items() if c > 1)
    if dup_seats:
        raise LayoutInconsistency(d.zone, f"catalog has duplicate seat numbers: {dup_seats}")

    missing = sorted(set(referenced) - set(in_catalog))
    if missing:
        raise LayoutInconsistency(d.zone, f"layout references seats missing from catalog: {missing}")

    orphans = sorted(set(in_catalog) - set(referenced))
    if orphans:
        raise LayoutInconsistency(d.zone, f"orphaned seats not covered by any slot: {orphans}")


ZONE_A = ZoneLayoutDefinition.from_rows(
    "A",
    3,
    [
        "1 .  8  9 10 . 14 15 16",
        "2 . 11 12 13 . 17 18 19",
        "3 .  .  .  . .  .  .  .",
        "4 . 20 21 22 . 26 27 28",
        "5 . 23 24 25 . 29 30 31",
        "6 .  .  .  . .  .  .  .",
        "7 .  .  .  . .  .  .  .",
    ],
    title="Zone A - grade 3",
)

ZONE_B = ZoneLayoutDefinition.from_rows(
    "B",
    2,
    [
        " 1  2  3  4  5  6  7  8  9 10",
        "11 12 13 14 15 16 17 18 19 20",
        "21 22 23 24 25 26 27 28 29 30",
        "31 32 33 34 35 36 37 38 39  .",
    ],
    title="Zone B - grade 2 enclosed",
)

ZONE_C = ZoneLayoutDefinition.from_rows(
    "C",
    2,
    [
        " 1  2  3  4  5  6  7",
        " 8  9 10 11 12 13 14",
        "15 16 17 18 19 20 21",
        " . 22 23 24 25 26  .",
    ],
    title="Zone C - grade 2 enclosed",
)

ZONE_D = ZoneLayoutDefinition.from_rows(
    "D",
    2,
    [
        " 1  2  .  5  6  .  9 10  . 13 14 15",
        " 3  4  .  7  8  . 11 12  . 16 17 18",
        "19 20 21 22 23 24 25 26  . 27 28 29",
        " .  .  .  .  .  .  .  .  . 30 31 32",
    ],
    title="Zone D - grade 2 open",
)

DEFAULT_REGISTRY = LayoutRegistry((ZONE_A, ZONE_B, ZONE_C, ZONE_D))
