"""Mini README: Transport-independent dispatch operations.

Structure:
    * DispatchController - the six operations exposed to clients, working on
      one ``FleetRegistry`` passed in by the caller.

HTTP handlers, CLIs or tests call the controller; it raises the errors from
``dronedispatch.errors`` and returns ``DroneDTO`` views ready to serialise.
A drone whose initial cargo fails to load is rejected outright and never
reaches the registry; the partially loaded instance stays available on the
raised ``PartialLoadError`` for callers that want it.
"""

from __future__ import annotations

import json
from typing import Iterable, List

from .errors import NoCargoLoaded, NoDronesAvailable
from .fleet import Drone, DroneDTO, FleetRegistry, LoadResult, MedicationDTO
from .logging_utils import get_logger

LOGGER = get_logger(__name__)


class DispatchController:
    """Register drones, load medications and answer fleet queries."""

    def __init__(self, registry: FleetRegistry) -> None:
        self.registry = registry

    def register_drone(self, description: DroneDTO) -> Drone:
        """Validate ``description``, build the drone and add it to the fleet."""

        drone = Drone.from_dto(description)
        self.registry.register(drone)
        LOGGER.info(
            "New drone added: %s", json.dumps(drone.view_full().dump(), indent=2)
        )
        return drone

    def load_medications(
        self, serial_number: str, medications: Iterable[MedicationDTO]
    ) -> LoadResult:
        """Load descriptions onto a registered drone, fail-fast.

        Raises ``NotFoundError`` for an unknown drone and ``PartialLoadError``
        when an item is invalid or does not fit; items before it stay loaded.
        """

        drone = self.registry.lookup(serial_number)
        result = drone.load_descriptions(medications)
        result.raise_for_error()
        LOGGER.info("Medications loaded in drone %s: %s", serial_number, result.loaded)
        return result

    def cargo(self, serial_number: str, *, include_images: bool = False) -> DroneDTO:
        drone = self.registry.lookup(serial_number)
        if not drone.has_cargo():
            raise NoCargoLoaded(
                f"drone with serial number '{serial_number}' has not loaded medications"
            )
        return drone.view_cargo(include_images=include_images)

    def battery(self, serial_number: str) -> DroneDTO:
        return self.registry.lookup(serial_number).view_battery()

    def available_drones(self) -> List[DroneDTO]:
        """Summary views of drones ready for loading; raises when there are none."""

        drones = [drone.view_summary() for drone in self.registry.list_available()]
        if not drones:
            raise NoDronesAvailable("there is not available drones for loading")
        return drones

    def all_drones(self) -> List[DroneDTO]:
        drones = [drone.view_full() for drone in self.registry.list_all()]
        LOGGER.info(
            "Data of the %s registered drones:\n%s",
            len(drones),
            json.dumps([drone.dump() for drone in drones], indent=2),
        )
        return drones
