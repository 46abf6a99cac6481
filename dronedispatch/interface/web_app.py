"""Mini README: FastAPI-powered HTTP API for the dispatch controller.

Structure:
    * create_application - application factory wiring routes, error handlers
      and the battery monitor lifespan.

Every answer uses the ``DispatchResponse`` envelope (``ok``, ``details``,
``drones``) with empty fields omitted. Business errors raised by the
controller are turned into ``HTTPException`` with the status code carried by
the error, and a single handler renders them in the envelope. Payloads that
cannot be decoded and missing query parameters are answered with 400.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..configuration import DispatchSettings, get_settings
from ..controller import DispatchController
from ..errors import DispatchError
from ..fleet import DispatchResponse, DroneDTO, FleetRegistry
from ..fleet.demo import build_demo_fleet, load_sample_image
from ..logging_utils import get_logger
from ..reporting import BatteryMonitor

LOGGER = get_logger(__name__)


def _envelope(
    ok: bool, details: Optional[str] = None, drones: Optional[List[DroneDTO]] = None
) -> dict:
    return DispatchResponse(ok=ok, details=details, drones=drones).dump()


def _reject(error: DispatchError, prefix: Optional[str] = None) -> HTTPException:
    message = f"{prefix}: {error.message}" if prefix else error.message
    return HTTPException(status_code=error.status_code, detail=message)


def create_application(
    settings: Optional[DispatchSettings] = None,
    registry: Optional[FleetRegistry] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    if registry is None:
        registry = FleetRegistry()
        if settings.preload_demo_fleet:
            sample_image = load_sample_image(settings.sample_image_path)
            for drone in build_demo_fleet(sample_image):
                registry.register(drone)
            LOGGER.info("Preload of data successfully completed (%s drones)", len(registry))
    controller = DispatchController(registry)
    monitor = BatteryMonitor(registry, interval_seconds=settings.log_period_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        monitor.start()
        try:
            yield
        finally:
            monitor.stop()
            LOGGER.info("Drones Management API is now closed")

    app = FastAPI(title="Drone Dispatch Controller", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.controller = controller
    app.state.battery_monitor = monitor

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, error: StarletteHTTPException) -> JSONResponse:
        """Render HTTP errors in the response envelope."""

        LOGGER.warning(
            "%s %s -> %s: %s", request.method, request.url.path, error.status_code, error.detail
        )
        return JSONResponse(
            status_code=error.status_code, content=_envelope(False, str(error.detail))
        )

    @app.exception_handler(RequestValidationError)
    async def decoding_error(request: Request, error: RequestValidationError) -> JSONResponse:
        """Answer undecodable bodies and missing parameters with 400."""

        missing = [
            str(entry["loc"][-1])
            for entry in error.errors()
            if entry.get("loc") and entry["loc"][0] == "query"
        ]
        if missing:
            details = f"request lacks of parameter '{missing[0]}'"
        else:
            details = "could not decode drone json object"
        LOGGER.warning(
            "%s %s -> 400: %s (%s)", request.method, request.url.path, details, error.errors()
        )
        return JSONResponse(status_code=400, content=_envelope(False, details))

    # Plain ``def`` routes run in the worker threadpool, one request per thread.
    @app.post("/drone/register")
    def register_drone(description: DroneDTO) -> JSONResponse:
        """Validate and register a new drone with its optional initial cargo."""

        try:
            drone = controller.register_drone(description)
        except DispatchError as error:
            raise _reject(error, "could not add new drone") from error
        return JSONResponse(
            _envelope(True, f"new drone with serial number {drone.serial_number} added")
        )

    @app.post("/drone/load")
    def load_medications(load: DroneDTO) -> JSONResponse:
        """Load the listed medications on the drone named by ``serial_number``."""

        try:
            result = controller.load_medications(load.serial_number, load.medications or [])
        except DispatchError as error:
            raise _reject(error, "error while trying to load medications on drone") from error
        return JSONResponse(
            _envelope(
                True,
                f"{result.loaded} medications loaded in drone with serial number "
                f"{load.serial_number}",
            )
        )

    @app.get("/drone/medications")
    def drone_medications(
        serial_number: str = Query(...),
        include_images: bool = Query(False),
    ) -> JSONResponse:
        """Return the cargo of a drone; images only when explicitly requested."""

        try:
            view = controller.cargo(serial_number, include_images=include_images)
        except DispatchError as error:
            raise _reject(error) from error
        LOGGER.info("Medications in drone %s: %s", serial_number, len(view.medications or []))
        return JSONResponse(
            _envelope(
                True,
                f"this are the medications loaded in drone with serial number {serial_number}",
                [view],
            )
        )

    @app.get("/drone/battery")
    def drone_battery(
        serial_number: str = Query(...),
    ) -> JSONResponse:
        try:
            view = controller.battery(serial_number)
        except DispatchError as error:
            raise _reject(error) from error
        LOGGER.info("Battery capacity of drone %s: %s %%", serial_number, view.battery_capacity)
        return JSONResponse(
            _envelope(
                True,
                f"this is the battery capacity of drone with serial number {serial_number}",
                [view],
            )
        )

    @app.get("/drone/all/availables")
    def available_drones() -> JSONResponse:
        try:
            drones = controller.available_drones()
        except DispatchError as error:
            raise _reject(error) from error
        LOGGER.info("%s drones available for loading", len(drones))
        return JSONResponse(
            _envelope(True, f"this are the {len(drones)} available drones for loading", drones)
        )

    @app.get("/drone/all")
    def all_drones() -> JSONResponse:
        """Return the full view of every registered drone."""

        drones = controller.all_drones()
        return JSONResponse(
            _envelope(True, f"this are the {len(drones)} registered drones", drones or None)
        )

    return app
