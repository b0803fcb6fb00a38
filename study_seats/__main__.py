from __future__ import annotations

import argparse
import csv
from pathlib import Path
from typing import Optional

from loguru import logger

from .chart import SeatingChart, SeatSlot
from .layout import DEFAULT_REGISTRY
from .logging_config import configure_logging
from .models import SeatingChartError, as_date
from .occupancy import Mode, Status
from .render import render_ascii, render_legend
from .storage import load_snapshot, maybe_init_snapshot


DEFAULT_FILE = "study_seats.json"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--file",
        default=DEFAULT_FILE,
        help=f"Path to snapshot JSON file (default: {DEFAULT_FILE})",
    )


def _add_render_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--grade", type=int, required=True, help="Viewer grade; zones of other grades are hidden")
    p.add_argument("--date", required=True, help="Reservation date (YYYY-MM-DD)")
    p.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.view.value)
    p.add_argument("--selected", default=None, help="Currently selected seat id (select mode)")


def _load_chart(path: str) -> tuple[SeatingChart, list]:
    snapshot = load_snapshot(path)
    chart = SeatingChart(snapshot.seats, DEFAULT_REGISTRY)
    return chart, snapshot.reservations


def cmd_init(args: argparse.Namespace) -> int:
    snapshot = maybe_init_snapshot(args.file, overwrite=args.overwrite)
    print(f"Initialized snapshot at {args.file} ({len(snapshot.seats)} seats)")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    chart, _ = _load_chart(args.file)
    for d in chart.registry.definitions:
        print(f"{d.zone}: grade {d.grade}, {len(d.seat_numbers())} seats, {d.gap_count()} gaps")
    print("OK")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    chart, reservations = _load_chart(args.file)
    day = as_date(args.date)
    if args.zone:
        d = chart.registry.get(args.zone)
        zones = [(d, chart.render_slots(d.zone, args.grade, reservations, day, args.mode, args.selected))]
    else:
        zones = chart.render_grade(args.grade, reservations, day, args.mode, args.selected)

    blocks = [render_ascii(d, slots, cell_width=args.width) for d, slots in zones]
    blocks = [b for b in blocks if b]
    if not blocks:
        print(f"No zones visible to grade {args.grade}")
        return 1
    print("\n\n".join(blocks))
    if args.mode == Mode.view.value:
        print()
        print(render_legend())
    return 0


def cmd_legend(args: argparse.Namespace) -> int:
    print(render_legend())
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    chart, reservations = _load_chart(args.file)
    counts = chart.summary(reservations, as_date(args.date), zone=args.zone)
    total = sum(counts.values())
    print(f"{args.zone or 'all zones'} on {args.date}: {total} seats")
    for status in Status:
        print(f"  {status.value}: {counts[status]}")
    return 0


def cmd_export_csv(args: argparse.Namespace) -> int:
    chart, reservations = _load_chart(args.file)
    zones = chart.render_grade(args.grade, reservations, as_date(args.date), args.mode, args.selected)
    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["zone", "slot", "seat_id", "number", "status", "selectable", "selected", "color"])
        for d, slots in zones:
            for i, slot in enumerate(slots):
                if isinstance(slot, SeatSlot):
                    w.writerow(
                        [
                            d.zone,
                            i,
                            slot.seat.id,
                            slot.seat.number,
                            slot.status.value,
                            int(slot.selectable),
                            int(slot.selected),
                            slot.color.value,
                        ]
                    )
                else:
                    w.writerow([d.zone, i, "", "", "", "", "", ""])
    print(f"Exported render slots to {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="study_seats", description="Study room seating chart (CLI).")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create a snapshot holding the default seat catalog")
    _add_common_args(p_init)
    p_init.add_argument("--overwrite", action="store_true", help="Overwrite existing snapshot file")
    p_init.set_defaults(func=cmd_init)

    p_validate = sub.add_parser("validate", help="Check the seat catalog against every zone layout")
    _add_common_args(p_validate)
    p_validate.set_defaults(func=cmd_validate)

    p_show = sub.add_parser("show", help="Print the seating chart for a grade and date")
    _add_common_args(p_show)
    _add_render_args(p_show)
    p_show.add_argument("--zone", default=None, help="Only this zone")
    p_show.add_argument("--width", type=int, default=4, help="Cell width for display")
    p_show.set_defaults(func=cmd_show)

    p_legend = sub.add_parser("legend", help="Print the status legend")
    p_legend.set_defaults(func=cmd_legend)

    p_summary = sub.add_parser("summary", help="Count seats per status for a date")
    _add_common_args(p_summary)
    p_summary.add_argument("--date", required=True)
    p_summary.add_argument("--zone", default=None)
    p_summary.set_defaults(func=cmd_summary)

    p_export = sub.add_parser("export-csv", help="Export render slots for a grade and date to CSV")
    _add_common_args(p_export)
    _add_render_args(p_export)
    p_export.add_argument("--output", required=True)
    p_export.set_defaults(func=cmd_export_csv)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    configure_logging()
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except SeatingChartError as e:
        logger.debug("command {} failed: {}", args.cmd, e)
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
