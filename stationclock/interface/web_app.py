"""Mini README: FastAPI-powered control desk for Station Clock.

Structure:
    * create_application - application factory wiring routes and templates.
    * StartRequest / ResetRequest - JSON bodies for the mutating routes.

The desk renders the station grid, exposes JSON routes used by the grid's
buttons and live refresh, and a printable receipt for the last stopped
session. All state changes go through one ``LedgerService``; the routes only
translate its outcomes and errors into HTTP responses.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from .. import __version__
from ..configuration import StationClockSettings, get_settings
from ..errors import DoubleStart, InvalidPlayerCount, InvalidStationId
from ..logging_utils import get_logger
from ..receipts import format_amount, format_hms, receipt_context
from ..sessions import LedgerService, Outcome, build_service

LOGGER = get_logger(__name__)


class StartRequest(BaseModel):
    player_count: Optional[int] = None


class ResetRequest(BaseModel):
    confirm: bool = False


def _outcome_payload(outcome: Outcome) -> Dict[str, Any]:
    return {
        "state": outcome.ledger.as_document(),
        "receipt": outcome.receipt.as_dict() if outcome.receipt else None,
        "changed": outcome.changed,
        "persisted": outcome.persisted,
        "warning": outcome.warning,
    }


def create_application(
    service: Optional[LedgerService] = None,
    settings: Optional[StationClockSettings] = None,
) -> FastAPI:
    """Create the FastAPI application bound to one venue ledger."""

    settings = settings or get_settings()
    service = service or build_service(settings)
    venue = service.venue
    app = FastAPI(title=f"Station Clock - {venue.label}", version=__version__)
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    templates.env.filters["hms"] = format_hms
    templates.env.filters["tnd"] = format_amount
    app.state.ledger_service = service

    ledger = service.load()
    LOGGER.info(
        "Control desk ready for '%s' (%s stations, date %s)",
        venue.key,
        venue.station_count,
        ledger.date_key,
    )

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request) -> HTMLResponse:
        """Render the station grid with live figures as of now."""

        snapshot = service.snapshot()
        LOGGER.debug("Rendering dashboard (any running: %s)", snapshot.any_running)
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "venue": venue,
                "snapshot": snapshot,
                "rates": venue.describe_rates(),
                "timezone": service.zone.key,
                "refresh_ms": int(settings.refresh_interval_seconds * 1000),
            },
        )

    @app.get("/api/state")
    def read_state() -> JSONResponse:
        return JSONResponse(service.ledger.as_document())

    @app.put("/api/state")
    async def restore_state(request: Request) -> JSONResponse:
        """Replace the ledger with a client copy, normalised to a valid ledger."""

        try:
            payload = await request.json()
        except ValueError as error:
            raise HTTPException(status_code=400, detail="Invalid payload") from error
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")
        outcome = service.restore(payload)
        headers = {"X-Ledger-Persisted": "true" if outcome.persisted else "false"}
        if outcome.warning:
            headers["X-Ledger-Warning"] = outcome.warning
        return JSONResponse(outcome.ledger.as_document(), headers=headers)

    @app.get("/api/live")
    def live() -> JSONResponse:
        return JSONResponse(service.snapshot().as_dict())

    @app.post("/api/stations/{station_id}/start")
    def start_station(station_id: int, payload: Optional[StartRequest] = None) -> JSONResponse:
        player_count = payload.player_count if payload else None
        try:
            outcome = service.start(station_id, player_count, strict=True)
        except InvalidStationId as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except InvalidPlayerCount as error:
            raise HTTPException(status_code=422, detail=str(error)) from error
        except DoubleStart as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        return JSONResponse(_outcome_payload(outcome))

    @app.post("/api/stations/{station_id}/stop")
    def stop_station(station_id: int) -> JSONResponse:
        try:
            outcome = service.stop(station_id)
        except InvalidStationId as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return JSONResponse(_outcome_payload(outcome))

    @app.post("/api/reset")
    def reset(payload: ResetRequest) -> JSONResponse:
        if not payload.confirm:
            raise HTTPException(status_code=400, detail="Reset must be confirmed")
        return JSONResponse(_outcome_payload(service.reset()))

    @app.get("/receipts/last", response_class=HTMLResponse)
    async def last_receipt(request: Request) -> HTMLResponse:
        """Printable ticket for the most recently stopped session."""

        receipt = service.last_receipt
        if receipt is None:
            raise HTTPException(status_code=404, detail="No receipt issued yet")
        return templates.TemplateResponse(
            request,
            "receipt.html",
            {"receipt": receipt_context(receipt, venue, service.zone)},
        )

    return app
