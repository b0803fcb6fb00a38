from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from study_seats.chart import SeatingChart
from study_seats.layout import DEFAULT_REGISTRY
from study_seats.models import Reservation
from study_seats.storage import Snapshot, load_snapshot


_chart: Optional[SeatingChart] = None
_reservations: list[Reservation] = []
_init_lock = threading.Lock()


def _snapshot_path() -> Optional[Path]:
    value = os.environ.get("STUDY_SEATS_SNAPSHOT")
    return Path(value) if value else None


def init_catalog() -> SeatingChart:
    """
    Load and validate the default seat catalog.

    Reads the snapshot named by STUDY_SEATS_SNAPSHOT when set, otherwise uses
    the catalog the default layouts describe. A catalog that disagrees with
    the layouts raises LayoutInconsistency and must stop startup.
    """
    global _chart, _reservations

    path = _snapshot_path()
    if path is not None:
        snapshot = load_snapshot(path)
        source = str(path)
    else:
        snapshot = Snapshot(seats=DEFAULT_REGISTRY.build_catalog())
        source = "default layouts"

    chart = SeatingChart(snapshot.seats, DEFAULT_REGISTRY)
    _reservations = list(snapshot.reservations)
    _chart = chart
    logger.info("seat catalog loaded from {}: {} seats, {} reservations", source, len(chart.seats), len(_reservations))
    return chart


def get_chart() -> SeatingChart:
    if _chart is None:
        with _init_lock:
            if _chart is None:
                return init_catalog()
    return _chart


def get_reservations() -> list[Reservation]:
    get_chart()
    return _reservations
