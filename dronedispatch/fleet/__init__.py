"""Mini README: Fleet core (medications, drones and the registry).

``medication`` validates payload items, ``drone`` holds the loading state
machine and view projections, ``registry`` keys drones by serial number and
``demo`` builds the sample fleet preloaded at start-up. ``schemas`` defines the
descriptions exchanged with transports.
"""

from .drone import (
    LOADING_BATTERY_THRESHOLD,
    Drone,
    DroneModel,
    DroneState,
    LoadResult,
    new_drone,
)
from .medication import Medication, MedicationBatch, new_medication, new_medications
from .registry import FleetRegistry
from .schemas import DispatchResponse, DroneDTO, MedicationDTO

__all__ = [
    "DispatchResponse",
    "Drone",
    "DroneDTO",
    "DroneModel",
    "DroneState",
    "FleetRegistry",
    "LOADING_BATTERY_THRESHOLD",
    "LoadResult",
    "Medication",
    "MedicationBatch",
    "MedicationDTO",
    "new_drone",
    "new_medication",
    "new_medications",
]
