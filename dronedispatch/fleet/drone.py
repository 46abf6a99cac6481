"""Mini README: Drone entity, loading state machine and view projections.

Structure:
    * DroneModel / DroneState - enumerations of the accepted values.
    * LoadResult - outcome of a batch load (loaded, requested, error).
    * Drone - mutable fleet unit guarding its cargo with its own lock.
    * new_drone - validating constructor applying the checks in a fixed order.

Rules enforced here:
    * the summed cargo weight never exceeds ``weight_limit``;
    * a drone is never in LOADING while its battery is under
      ``LOADING_BATTERY_THRESHOLD`` percent, neither at construction nor
      during a load.

Every mutation and every view takes the drone's lock, so concurrent loaders
of the same drone are serialised while different drones load in parallel.
Batch loads are fail-fast with no rollback: items loaded before the failing
one stay on the drone and the ``LoadResult`` says how many there were.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..errors import (
    BatteryTooLow,
    DispatchError,
    InvalidBatteryCapacity,
    InvalidModel,
    InvalidSerialNumber,
    InvalidState,
    InvalidWeightLimit,
    LoadingWithLowBattery,
    PartialLoadError,
    WeightExceeded,
)
from ..logging_utils import get_logger
from .medication import Medication
from .schemas import DroneDTO, MedicationDTO

LOGGER = get_logger(__name__)

MAX_SERIAL_NUMBER_LENGTH = 100
MAX_WEIGHT_LIMIT = 500
MIN_BATTERY_CAPACITY = 1
MAX_BATTERY_CAPACITY = 100
LOADING_BATTERY_THRESHOLD = 25


class DroneModel(str, Enum):
    """Weight classes a drone can be registered with."""

    LIGHTWEIGHT = "Lightweight"
    MIDDLEWEIGHT = "Middleweight"
    CRUISERWEIGHT = "Cruiserweight"
    HEAVYWEIGHT = "Heavyweight"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "DroneModel":
        """Return the matching model; the comparison is case sensitive."""

        try:
            return cls(value)
        except ValueError as error:
            raise InvalidModel(f"{value!r} is not a valid model") from error


class DroneState(str, Enum):
    """Lifecycle states reported by a drone."""

    IDLE = "IDLE"
    LOADING = "LOADING"
    LOADED = "LOADED"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    RETURNING = "RETURNING"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "DroneState":
        try:
            return cls(value)
        except ValueError as error:
            raise InvalidState(f"{value!r} is not a valid state") from error


@dataclass(frozen=True, slots=True)
class LoadResult:
    """How far a batch load got before it stopped."""

    loaded: int
    requested: int
    error: Optional[DispatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise ``PartialLoadError`` if the batch did not complete."""

        if self.error is not None:
            raise PartialLoadError(self.loaded, self.requested, self.error) from self.error


def _loading_with_low_battery(state: DroneState, battery_capacity: int) -> bool:
    return state is DroneState.LOADING and battery_capacity < LOADING_BATTERY_THRESHOLD


class Drone:
    """Fleet unit carrying an ordered cargo of medications.

    Instances are normally built with ``new_drone`` or ``Drone.from_dto``,
    which validate the description first. The constructor itself trusts its
    arguments.
    """

    def __init__(
        self,
        serial_number: str,
        model: DroneModel,
        weight_limit: int,
        battery_capacity: int,
        state: DroneState,
    ) -> None:
        self._serial_number = serial_number
        self._model = model
        self._weight_limit = weight_limit
        self._battery_capacity = battery_capacity
        self._state = state
        self._cargo: List[Medication] = []
        self._lock = threading.Lock()

    @classmethod
    def from_dto(cls, dto: DroneDTO) -> "Drone":
        """Validate a client description and build the drone with its cargo."""

        return new_drone(
            dto.serial_number,
            dto.model,
            dto.weight_limit if dto.weight_limit is not None else 0,
            dto.battery_capacity if dto.battery_capacity is not None else 0,
            dto.state,
            dto.medications or (),
        )

    def __repr__(self) -> str:
        return (
            f"Drone(serial_number={self._serial_number!r}, model={self._model.value!r}, "
            f"state={self.state.value!r}, battery_capacity={self.battery_capacity})"
        )

    @property
    def serial_number(self) -> str:
        return self._serial_number

    @property
    def model(self) -> DroneModel:
        return self._model

    @property
    def weight_limit(self) -> int:
        return self._weight_limit

    @property
    def battery_capacity(self) -> int:
        with self._lock:
            return self._battery_capacity

    @property
    def state(self) -> DroneState:
        with self._lock:
            return self._state

    @property
    def cargo(self) -> List[Medication]:
        """Copy of the loaded medications in loading order."""

        with self._lock:
            return list(self._cargo)

    def _current_weight(self) -> int:
        return sum(item.weight for item in self._cargo)

    @property
    def current_weight(self) -> int:
        """Total weight in grams of the loaded medications."""

        with self._lock:
            return self._current_weight()

    @property
    def remaining_capacity(self) -> int:
        with self._lock:
            return self._weight_limit - self._current_weight()

    def load_one(self, medication: Medication) -> None:
        """Load a single medication or raise without touching the drone.

        Raises ``BatteryTooLow`` when the battery is under the loading
        threshold and ``WeightExceeded`` when the item would take the cargo
        over the weight limit.
        """

        with self._lock:
            if self._battery_capacity < LOADING_BATTERY_THRESHOLD:
                raise BatteryTooLow(
                    f"drone should not be {DroneState.LOADING.value} when the battery "
                    f"level is below {LOADING_BATTERY_THRESHOLD} %"
                )
            current_weight = self._current_weight()
            if medication.weight + current_weight > self._weight_limit:
                raise WeightExceeded(
                    "the drone must not be loaded with more weight than it can carry: "
                    f"{current_weight} + {medication.weight} > {self._weight_limit}"
                )
            self._state = DroneState.LOADING
            self._cargo.append(medication)
            self._state = DroneState.LOADED
        LOGGER.debug(
            "Loaded %s (%sg) on drone %s", medication.code, medication.weight, self._serial_number
        )

    def load_many(self, medications: Iterable[Medication]) -> LoadResult:
        """Load items in order, stopping at the first failure without rollback."""

        medications = list(medications)
        loaded = 0
        for medication in medications:
            try:
                self.load_one(medication)
            except DispatchError as error:
                LOGGER.debug(
                    "Drone %s stopped loading after %s of %s: %s",
                    self._serial_number,
                    loaded,
                    len(medications),
                    error,
                )
                return LoadResult(loaded=loaded, requested=len(medications), error=error)
            loaded += 1
        return LoadResult(loaded=loaded, requested=len(medications))

    def load_descriptions(self, dtos: Iterable[MedicationDTO]) -> LoadResult:
        """Validate and load descriptions one by one, fail-fast.

        Conversion and loading are interleaved: an invalid description stops
        the batch after the valid items before it have been loaded.
        """

        dtos = list(dtos)
        loaded = 0
        for dto in dtos:
            try:
                self.load_one(Medication.from_dto(dto))
            except DispatchError as error:
                return LoadResult(loaded=loaded, requested=len(dtos), error=error)
            loaded += 1
        return LoadResult(loaded=loaded, requested=len(dtos))

    def _reset_state(self, state: DroneState) -> None:
        with self._lock:
            self._state = state

    def update_battery_capacity(self, battery_capacity: int) -> None:
        """Record a new battery reading from telemetry."""

        if not _valid_battery_capacity(battery_capacity):
            raise InvalidBatteryCapacity(f"{battery_capacity!r} is not a valid battery capacity")
        with self._lock:
            if _loading_with_low_battery(self._state, battery_capacity):
                raise LoadingWithLowBattery(
                    f"drone should not be {DroneState.LOADING.value} when the battery "
                    f"level is below {LOADING_BATTERY_THRESHOLD} %"
                )
            self._battery_capacity = battery_capacity

    def has_cargo(self) -> bool:
        with self._lock:
            return bool(self._cargo)

    def is_available_for_loading(self) -> bool:
        """True when the drone is idle with enough charge to start loading."""

        with self._lock:
            return (
                self._state is DroneState.IDLE
                and self._battery_capacity >= LOADING_BATTERY_THRESHOLD
            )

    # Views. Each one reads under the lock so it reflects a single instant.

    def view_full(self) -> DroneDTO:
        """Every field, cargo included with images."""

        with self._lock:
            return DroneDTO(
                serial_number=self._serial_number,
                model=self._model.value,
                weight_limit=self._weight_limit,
                battery_capacity=self._battery_capacity,
                state=self._state.value,
                medications=[item.to_dto() for item in self._cargo] or None,
            )

    def view_summary(self) -> DroneDTO:
        return DroneDTO(serial_number=self._serial_number)

    def view_battery(self) -> DroneDTO:
        with self._lock:
            return DroneDTO(
                serial_number=self._serial_number,
                battery_capacity=self._battery_capacity,
            )

    def view_cargo(self, *, include_images: bool = False) -> DroneDTO:
        """Serial number and cargo; images are dropped unless asked for."""

        with self._lock:
            return DroneDTO(
                serial_number=self._serial_number,
                medications=[
                    item.to_dto(include_image=include_images) for item in self._cargo
                ],
            )


def _valid_serial_number(serial_number: Optional[str]) -> bool:
    return (
        isinstance(serial_number, str)
        and 0 < len(serial_number) <= MAX_SERIAL_NUMBER_LENGTH
    )


def _valid_weight_limit(weight_limit: int) -> bool:
    return (
        isinstance(weight_limit, int)
        and not isinstance(weight_limit, bool)
        and 0 <= weight_limit <= MAX_WEIGHT_LIMIT
    )


def _valid_battery_capacity(battery_capacity: int) -> bool:
    return (
        isinstance(battery_capacity, int)
        and not isinstance(battery_capacity, bool)
        and MIN_BATTERY_CAPACITY <= battery_capacity <= MAX_BATTERY_CAPACITY
    )


def new_drone(
    serial_number: str,
    model: Optional[str | DroneModel],
    weight_limit: int,
    battery_capacity: int,
    state: Optional[str | DroneState],
    medications: Sequence[MedicationDTO | Medication] = (),
) -> Drone:
    """Validate a drone description and return the drone with its cargo.

    Checks run in this order and the first failure is raised: serial number,
    model, weight limit, battery capacity, state, LOADING with a low battery.
    The initial cargo is then loaded item by item and the drone keeps the
    described state afterwards. If an item is invalid or does not fit,
    ``PartialLoadError`` is raised carrying the number of items loaded and
    the partially loaded drone in ``drone``.
    """

    if not _valid_serial_number(serial_number):
        raise InvalidSerialNumber(f"{serial_number!r} is not a valid serial number")
    drone_model = DroneModel.from_str(model)
    if not _valid_weight_limit(weight_limit):
        raise InvalidWeightLimit(f"{weight_limit!r} is not a valid weight limit")
    if not _valid_battery_capacity(battery_capacity):
        raise InvalidBatteryCapacity(f"{battery_capacity!r} is not a valid battery capacity")
    drone_state = DroneState.from_str(state)
    if _loading_with_low_battery(drone_state, battery_capacity):
        raise LoadingWithLowBattery(
            f"drone should not be {DroneState.LOADING.value} when the battery level "
            f"is below {LOADING_BATTERY_THRESHOLD} %"
        )

    drone = Drone(serial_number, drone_model, weight_limit, battery_capacity, drone_state)
    if medications:
        items = list(medications)
        descriptions = [
            item if isinstance(item, MedicationDTO) else item.to_dto() for item in items
        ]
        result = drone.load_descriptions(descriptions)
        # The description reports the drone's real state; loading its cargo
        # must not overwrite it.
        drone._reset_state(drone_state)
        if not result.ok:
            raise PartialLoadError(
                result.loaded, result.requested, result.error, drone=drone
            ) from result.error
    return drone


__all__ = [
    "Drone",
    "DroneModel",
    "DroneState",
    "LoadResult",
    "LOADING_BATTERY_THRESHOLD",
    "MAX_SERIAL_NUMBER_LENGTH",
    "MAX_WEIGHT_LIMIT",
    "new_drone",
]
