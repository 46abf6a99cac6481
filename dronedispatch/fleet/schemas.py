"""Mini README: Wire-level descriptions of drones and medications.

Structure:
    * MedicationDTO - one payload item as received from or sent to clients.
    * DroneDTO - drone description; also the single shape used by every view.
    * DispatchResponse - uniform envelope returned by the HTTP API.

Fields are deliberately loose (plain strings and integers, mostly optional):
the fleet core owns the format and range rules and checks them in a fixed
order, so decoding must not reject a payload before the core sees it. Views
leave unused fields as ``None`` and ``dump`` drops them, which keeps the JSON
free of nulls.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MedicationDTO(BaseModel):
    """Medication description exchanged with clients."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    weight: int = 0
    code: str = ""
    image: Optional[str] = Field(
        None, description="Picture of the medication case, base64 encoded."
    )


class DroneDTO(BaseModel):
    """Drone description exchanged with clients."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    serial_number: str = ""
    model: Optional[str] = None
    weight_limit: Optional[int] = None
    battery_capacity: Optional[int] = None
    state: Optional[str] = None
    medications: Optional[List[MedicationDTO]] = None

    def dump(self) -> Dict[str, Any]:
        """Return a JSON-ready mapping without unset fields."""

        return self.model_dump(exclude_none=True)


class DispatchResponse(BaseModel):
    """Envelope wrapping every HTTP API answer."""

    ok: bool
    details: Optional[str] = None
    drones: Optional[List[DroneDTO]] = None

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
