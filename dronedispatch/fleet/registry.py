"""Mini README: Fleet registry keyed by drone serial number.

Structure:
    * FleetRegistry - thread-safe mapping of serial numbers to ``Drone`` objects.

The registry owns its own lock, separate from the lock inside each drone:
registration changes the shape of the collection, loading changes a single
drone. Lookups hand out the registered ``Drone`` itself so callers mutate it
through its own locked operations; a registered drone is never replaced.
Listing copies the values under the registry lock and reads each drone
afterwards, so a fleet-wide listing never holds more than one drone lock at
a time.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Optional

from ..errors import ConflictError, NotFoundError
from ..logging_utils import get_logger
from .drone import Drone
from .schemas import DroneDTO

LOGGER = get_logger(__name__)


class FleetRegistry:
    """Process-lifetime collection of every known drone."""

    def __init__(self, drones: Optional[Iterable[Drone]] = None) -> None:
        self._drones: Dict[str, Drone] = {}
        self._lock = threading.Lock()
        for drone in drones or ():
            self.register(drone)
        LOGGER.debug("Initialised FleetRegistry with %s drones", len(self._drones))

    def register(self, drone: Drone) -> None:
        """Add ``drone``; raise ``ConflictError`` if its serial number is taken."""

        with self._lock:
            if drone.serial_number in self._drones:
                raise ConflictError(
                    f"drone with serial number {drone.serial_number} already exists"
                )
            self._drones[drone.serial_number] = drone
        LOGGER.debug("Registered drone '%s'", drone.serial_number)

    def lookup(self, serial_number: str) -> Drone:
        """Return the registered drone or raise ``NotFoundError``."""

        with self._lock:
            drone = self._drones.get(serial_number)
        if drone is None:
            raise NotFoundError(f"drone with serial number '{serial_number}' was not found")
        return drone

    def list_all(self) -> List[Drone]:
        """Every registered drone; the order is not meaningful."""

        with self._lock:
            return list(self._drones.values())

    def list_available(self) -> List[Drone]:
        return [drone for drone in self.list_all() if drone.is_available_for_loading()]

    def battery_snapshot(self) -> List[DroneDTO]:
        """Battery view of every drone, each read under that drone's lock only."""

        return [drone.view_battery() for drone in self.list_all()]

    def __contains__(self, serial_number: object) -> bool:
        with self._lock:
            return serial_number in self._drones

    def __len__(self) -> int:
        with self._lock:
            return len(self._drones)

    def __iter__(self) -> Iterator[Drone]:
        return iter(self.list_all())
