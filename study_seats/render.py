from __future__ import annotations

from typing import Optional, Sequence

from .chart import RenderSlot, SeatSlot
from .layout import ZoneLayoutDefinition
from .occupancy import LEGEND, ColorKey


MARKERS: dict[ColorKey, str] = {
    ColorKey.none: "",
    ColorKey.available: "",
    ColorKey.reserved: "R",
    ColorKey.checked_in: "C",
    ColorKey.no_show: "N",
    ColorKey.blocked: "x",
    ColorKey.selected: "*",
}


def _cell(text: Optional[str], width: int) -> str:
    if not text:
        return ".".center(width)
    t = str(text)
    if len(t) > width:
        t = t[: max(0, width - 1)] + "…"
    return t.center(width)


def _slot_text(slot: RenderSlot) -> Optional[str]:
    if not isinstance(slot, SeatSlot):
        return None
    return f"{slot.seat.number}{MARKERS[slot.color]}"


def render_ascii(definition: ZoneLayoutDefinition, slots: Sequence[RenderSlot], *, cell_width: int = 4) -> str:
    """Draw a zone's render slots on its grid; a hidden zone (no slots) draws nothing."""
    if not slots:
        return ""
    cell_width = max(3, int(cell_width))
    cols = definition.columns

    lines = [definition.title or f"Zone {definition.zone}"]
    for i in range(0, len(slots), cols):
        lines.append(" ".join(_cell(_slot_text(s), cell_width) for s in slots[i : i + cols]).rstrip())
    return "\n".join(lines)


def render_legend() -> str:
    width = max(len(s.value) for s in LEGEND)
    lines = ["Legend:"]
    for status, key in LEGEND.items():
        marker = MARKERS[key] or "-"
        lines.append(f"  {status.value.ljust(width)}  {marker}  ({key.value})")
    return "\n".join(lines)
