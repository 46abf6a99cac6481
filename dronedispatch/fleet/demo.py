"""Mini README: Sample fleet registered when the service starts.

Structure:
    * load_sample_image - read the medication-case picture as base64 text.
    * build_demo_fleet - five drones with random serial numbers and codes.

The sample lets operators try the API straight away. Serial numbers are 50
random alphanumeric characters and medication codes 32 random upper-case
alphanumeric characters, so every start produces a fresh fleet. Drones that
carry cargo are described as LOADED, so only the empty ones are available.
"""

from __future__ import annotations

import base64
import random
import string
from pathlib import Path
from typing import List, Optional

from ..logging_utils import get_logger
from .drone import Drone, DroneModel, DroneState, new_drone
from .schemas import MedicationDTO

LOGGER = get_logger(__name__)

_ALPHANUMERIC = string.ascii_letters + string.digits


def _random_alphanumeric(length: int, rng: random.Random) -> str:
    return "".join(rng.choice(_ALPHANUMERIC) for _ in range(length))


def load_sample_image(path: Optional[Path]) -> Optional[str]:
    """Return the picture at ``path`` base64 encoded, or ``None`` if unreadable."""

    if path is None:
        return None
    try:
        content = Path(path).read_bytes()
    except OSError as error:
        LOGGER.warning("It was not possible to open %s: %s", path, error)
        return None
    return base64.b64encode(content).decode("ascii")


def build_demo_fleet(
    sample_image: Optional[str] = None, rng: Optional[random.Random] = None
) -> List[Drone]:
    """Create the preloaded drones; weights stay within each limit."""

    rng = rng or random.Random()

    def cargo(*items: tuple) -> List[MedicationDTO]:
        return [
            MedicationDTO(
                name=name,
                code=_random_alphanumeric(32, rng).upper(),
                weight=weight,
                image=sample_image,
            )
            for name, weight in items
        ]

    layouts = [
        (
            DroneModel.LIGHTWEIGHT,
            150,
            cargo(
                ("Medication-A", 20),
                ("Medication-B", 40),
                ("Medication-C", 25),
                ("Medication-D", 10),
            ),
        ),
        (
            DroneModel.HEAVYWEIGHT,
            500,
            cargo(
                ("Medication-A", 200),
                ("Medication-B", 80),
                ("Medication-C", 50),
                ("Medication-D", 60),
            ),
        ),
        (DroneModel.MIDDLEWEIGHT, 300, []),
        (
            DroneModel.CRUISERWEIGHT,
            400,
            cargo(("Medication-C", 300), ("Medication-D", 90)),
        ),
        (DroneModel.LIGHTWEIGHT, 125, []),
    ]

    drones = [
        new_drone(
            _random_alphanumeric(50, rng),
            model,
            weight_limit,
            100,
            DroneState.LOADED if medications else DroneState.IDLE,
            medications,
        )
        for model, weight_limit, medications in layouts
    ]
    LOGGER.info("Built demo fleet with %s drones", len(drones))
    return drones
