from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .layout import DEFAULT_REGISTRY, LayoutRegistry
from .models import Reservation, Seat, SeatingChartError


@dataclass
class Snapshot:
    seats: list[Seat]
    reservations: list[Reservation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "seats": [s.to_dict() for s in self.seats],
            "reservations": [r.to_dict() for r in self.reservations],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Snapshot":
        if not isinstance(data, dict) or not isinstance(data.get("seats"), list):
            raise SeatingChartError("snapshot must be an object with a 'seats' list")
        reservations = data.get("reservations") or []
        if not isinstance(reservations, list):
            raise SeatingChartError("snapshot 'reservations' must be a list")
        return cls(
            seats=[Seat.from_dict(s) for s in data["seats"]],
            reservations=[Reservation.from_dict(r) for r in reservations],
        )


def load_snapshot(path: str | Path) -> Snapshot:
    p = Path(path)
    if not p.exists():
        raise SeatingChartError(f"snapshot file not found: {p}")

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SeatingChartError(f"failed to read snapshot JSON: {e}") from e

    return Snapshot.from_dict(data)


def save_snapshot(snapshot: Snapshot, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def maybe_init_snapshot(
    path: str | Path,
    *,
    registry: LayoutRegistry = DEFAULT_REGISTRY,
    overwrite: bool = False,
) -> Snapshot:
    """Load the snapshot at ``path``, or create one holding the registry's seat catalog and no reservations."""
    p = Path(path)
    if p.exists() and not overwrite:
        return load_snapshot(p)

    snapshot = Snapshot(seats=registry.build_catalog())
    save_snapshot(snapshot, p)
    return snapshot
