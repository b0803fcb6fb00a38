from __future__ import annotations

import datetime as dt
import os
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from study_seats.chart import SeatingChart
from study_seats.layout import DEFAULT_REGISTRY
from study_seats.logging_config import configure_logging
from study_seats.models import LayoutInconsistency, Reservation, SeatingChartError, UnknownSeat, UnknownZone
from study_seats.occupancy import LEGEND, Mode

from .catalog import get_chart, get_reservations, init_catalog
from .schemas import (
    LayoutOut,
    LegendEntry,
    RenderRequest,
    SeatStateOut,
    SummaryOut,
    SummaryRequest,
    ZoneRender,
    slot_out,
)


app = FastAPI(title="Study Room Seating API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("STUDY_SEATS_CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()
    init_catalog()


def _http_error(e: SeatingChartError) -> HTTPException:
    if isinstance(e, UnknownZone):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, LayoutInconsistency):
        return HTTPException(status_code=422, detail={"zone": e.zone, "detail": e.detail})
    return HTTPException(status_code=400, detail=str(e))


def _request_chart(payload: RenderRequest | SummaryRequest, default: SeatingChart) -> tuple[SeatingChart, list[Reservation]]:
    reservations = [r.to_reservation() for r in payload.reservations]
    if payload.seats is None:
        return default, reservations
    # A posted catalog is checked against the layouts once, as it is loaded.
    return SeatingChart([s.to_seat() for s in payload.seats], DEFAULT_REGISTRY), reservations


def _zone_render(chart: SeatingChart, zone: str, payload: RenderRequest, reservations: list[Reservation]) -> ZoneRender:
    d = chart.registry.get(zone)
    slots = chart.render_slots(zone, payload.grade, reservations, payload.date, payload.mode, payload.selected_seat_id)
    return ZoneRender(
        zone=d.zone,
        grade=d.grade,
        title=d.title,
        columns=d.columns,
        slots=[slot_out(s) for s in slots],
    )


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/layouts", response_model=list[LayoutOut])
def list_layouts(grade: Optional[int] = None) -> list[LayoutOut]:
    defs = DEFAULT_REGISTRY.definitions if grade is None else DEFAULT_REGISTRY.visible_zones(grade)
    return [LayoutOut.from_definition(d) for d in defs]


@app.get("/layouts/{zone}", response_model=LayoutOut)
def get_layout(zone: str) -> LayoutOut:
    try:
        return LayoutOut.from_definition(DEFAULT_REGISTRY.get(zone))
    except SeatingChartError as e:
        raise _http_error(e) from e


@app.get("/legend", response_model=list[LegendEntry])
def legend() -> list[LegendEntry]:
    return [LegendEntry(status=s, color=c) for s, c in LEGEND.items()]


@app.get("/zones/{zone}/slots", response_model=ZoneRender)
def zone_slots(
    zone: str,
    grade: int,
    date: dt.date,
    mode: Mode = Mode.view,
    selected_seat_id: Optional[str] = None,
    chart: SeatingChart = Depends(get_chart),
) -> ZoneRender:
    payload = RenderRequest(grade=grade, date=date, mode=mode, selected_seat_id=selected_seat_id)
    try:
        return _zone_render(chart, zone, payload, get_reservations())
    except SeatingChartError as e:
        raise _http_error(e) from e


@app.post("/zones/{zone}/render", response_model=ZoneRender)
def render_zone(zone: str, payload: RenderRequest, chart: SeatingChart = Depends(get_chart)) -> ZoneRender:
    try:
        chart, reservations = _request_chart(payload, chart)
        return _zone_render(chart, zone, payload, reservations)
    except SeatingChartError as e:
        raise _http_error(e) from e


@app.post("/render", response_model=list[ZoneRender])
def render_grade(payload: RenderRequest, chart: SeatingChart = Depends(get_chart)) -> list[ZoneRender]:
    try:
        chart, reservations = _request_chart(payload, chart)
        return [_zone_render(chart, d.zone, payload, reservations) for d in chart.registry.visible_zones(payload.grade)]
    except SeatingChartError as e:
        raise _http_error(e) from e


@app.get("/seats/{seat_id}/state", response_model=SeatStateOut)
def seat_state(
    seat_id: str,
    date: dt.date,
    mode: Mode = Mode.view,
    selected_seat_id: Optional[str] = None,
    chart: SeatingChart = Depends(get_chart),
) -> SeatStateOut:
    reservations = get_reservations()
    try:
        return SeatStateOut(
            seat_id=seat_id,
            date=date,
            status=chart.status(seat_id, reservations, date),
            selectable=chart.selectable(seat_id, reservations, date, mode),
            color=chart.color(seat_id, reservations, date, mode, selected_seat_id),
        )
    except UnknownSeat as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@app.get("/summary", response_model=SummaryOut)
def summary(date: dt.date, zone: Optional[str] = None, chart: SeatingChart = Depends(get_chart)) -> SummaryOut:
    try:
        counts = chart.summary(get_reservations(), date, zone=zone)
    except SeatingChartError as e:
        raise _http_error(e) from e
    return SummaryOut(date=date, zone=zone, seats_total=sum(counts.values()), counts=counts)


@app.post("/summary", response_model=SummaryOut)
def summary_for_snapshot(payload: SummaryRequest, chart: SeatingChart = Depends(get_chart)) -> SummaryOut:
    try:
        chart, reservations = _request_chart(payload, chart)
        counts = chart.summary(reservations, payload.date, zone=payload.zone)
    except SeatingChartError as e:
        raise _http_error(e) from e
    return SummaryOut(date=payload.date, zone=payload.zone, seats_total=sum(counts.values()), counts=counts)
