"""Mini README: Medication payload items and their validation.

Structure:
    * Medication - immutable payload item (name, code, weight, optional image).
    * new_medication - validating constructor.
    * MedicationBatch - outcome of converting a list of descriptions.
    * new_medications - fail-fast batch conversion with progress reporting.

Names allow letters, digits, ``-`` and ``_``; codes allow upper-case letters,
digits and ``_`` only. Images are carried as opaque base64 text and never
inspected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..errors import InvalidCode, InvalidName, InvalidWeight, ValidationError
from .schemas import MedicationDTO

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
CODE_PATTERN = re.compile(r"^[A-Z0-9_]+$")


def is_valid_name(name: str) -> bool:
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name) is not None


def is_valid_code(code: str) -> bool:
    return isinstance(code, str) and CODE_PATTERN.fullmatch(code) is not None


@dataclass(frozen=True, slots=True)
class Medication:
    """One validated payload item. Build instances with ``new_medication``."""

    name: str
    code: str
    weight: int
    image: Optional[str] = None

    @classmethod
    def from_dto(cls, dto: MedicationDTO) -> "Medication":
        return new_medication(dto.name, dto.code, dto.weight, dto.image)

    def to_dto(self, *, include_image: bool = True) -> MedicationDTO:
        """Project the item for clients, optionally dropping the image."""

        return MedicationDTO(
            name=self.name,
            weight=self.weight,
            code=self.code,
            image=self.image if include_image else None,
        )


def new_medication(
    name: str, code: str, weight: int, image: Optional[str] = None
) -> Medication:
    """Validate the fields and return an immutable ``Medication``.

    Raises ``InvalidName`` first, then ``InvalidCode``, then ``InvalidWeight``.
    """

    if not is_valid_name(name):
        raise InvalidName(f"{name!r} is not a valid medication name")
    if not is_valid_code(code):
        raise InvalidCode(f"{code!r} is not a valid medication code")
    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
        raise InvalidWeight(f"{weight!r} is not a valid medication weight")
    return Medication(name=name, code=code, weight=weight, image=image or None)


@dataclass(slots=True)
class MedicationBatch:
    """Items converted before the first failure, plus that failure if any."""

    requested: int
    medications: List[Medication] = field(default_factory=list)
    error: Optional[ValidationError] = None

    @property
    def converted(self) -> int:
        return len(self.medications)

    @property
    def ok(self) -> bool:
        return self.error is None


def new_medications(dtos: Iterable[MedicationDTO]) -> MedicationBatch:
    """Convert descriptions in order, stopping at the first invalid one."""

    dtos = list(dtos)
    batch = MedicationBatch(requested=len(dtos))
    for dto in dtos:
        try:
            batch.medications.append(Medication.from_dto(dto))
        except ValidationError as error:
            batch.error = error
            break
    return batch
