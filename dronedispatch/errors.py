"""Mini README: Error taxonomy shared by the fleet core and its transports.

Structure:
    * DispatchError - root of every business error, carries ``status_code``.
    * ValidationError - malformed drone or medication fields (one subclass per field).
    * CapacityError - weight limit or battery rule refused a load.
    * NotFoundError - unknown serial number, empty cargo, no available drones.
    * ConflictError - duplicate serial number on registration.
    * EncodingError - payload could not be decoded at all.
    * PartialLoadError - a batch load stopped part way through.

Transports map ``status_code`` straight onto their response codes, so adding a
new error only requires picking the right parent class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - imported for annotations only
    from .fleet.drone import Drone


class DispatchError(Exception):
    """Base class for errors surfaced to dispatch controller clients."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DispatchError, ValueError):
    """A client supplied field failed its format or range rule."""

    field: str = "unknown"


class InvalidName(ValidationError):
    field = "name"


class InvalidCode(ValidationError):
    field = "code"


class InvalidWeight(ValidationError):
    field = "weight"


class InvalidSerialNumber(ValidationError):
    field = "serial_number"


class InvalidModel(ValidationError):
    field = "model"


class InvalidWeightLimit(ValidationError):
    field = "weight_limit"


class InvalidBatteryCapacity(ValidationError):
    field = "battery_capacity"


class InvalidState(ValidationError):
    field = "state"


class LoadingWithLowBattery(ValidationError):
    """Drone description claims LOADING while the battery is under threshold."""

    field = "state"


class CapacityError(DispatchError):
    """Business rule refused a load; retrying the same request will not help."""


class WeightExceeded(CapacityError):
    pass


class BatteryTooLow(CapacityError):
    pass


class NotFoundError(DispatchError, LookupError):
    status_code = 404


class NoCargoLoaded(NotFoundError):
    pass


class NoDronesAvailable(NotFoundError):
    pass


class ConflictError(DispatchError):
    """Registration of a serial number that is already in the fleet."""


class EncodingError(DispatchError):
    """Inbound payload was not decodable into a drone description."""


class PartialLoadError(DispatchError):
    """A batch load stopped at ``loaded`` of ``requested`` items.

    Items loaded before the failure stay on the drone. ``drone`` is only set
    when the failure happened while constructing a drone from a description,
    so callers can decide to keep the partially loaded instance.
    """

    def __init__(
        self,
        loaded: int,
        requested: int,
        cause: DispatchError,
        drone: Optional["Drone"] = None,
    ) -> None:
        super().__init__(
            f"successfully loaded medications: {loaded} of {requested}: {cause.message}"
        )
        self.loaded = loaded
        self.requested = requested
        self.cause = cause
        self.drone = drone
        self.status_code = cause.status_code
