"""Mini README: Tests for medication validation and batch conversion.

Structure:
    * name/code charset checks for valid and invalid inputs.
    * immutability of constructed medications.
    * fail-fast batch conversion reporting how many items were converted.
"""

from __future__ import annotations

import dataclasses

import pytest

from dronedispatch.errors import InvalidCode, InvalidName, InvalidWeight, ValidationError
from dronedispatch.fleet import Medication, MedicationDTO, new_medication, new_medications


@pytest.mark.parametrize(
    "name",
    ["Medication-A", "aspirin", "IBU_400", "x", "a-b_c-9", "0123456789"],
)
def test_valid_names_are_accepted(name: str) -> None:
    medication = new_medication(name, "CODE_1", 10)
    assert medication.name == name


@pytest.mark.parametrize(
    "name",
    ["", "with space", "semi;colon", "dot.name", "ümlaut", "slash/name", "trailing\n", "qu?ery"],
)
def test_invalid_names_raise_invalid_name(name: str) -> None:
    with pytest.raises(InvalidName):
        new_medication(name, "CODE_1", 10)


@pytest.mark.parametrize("code", ["ABC", "A_1", "123", "_", "MED_CODE_2024"])
def test_valid_codes_are_accepted(code: str) -> None:
    assert new_medication("Medication-A", code, 10).code == code


@pytest.mark.parametrize("code", ["", "abc", "Abc", "A-1", "A B", "A.B", "CODE\n"])
def test_invalid_codes_raise_invalid_code(code: str) -> None:
    """Codes use a stricter alphabet than names: no lower case, no hyphen."""

    with pytest.raises(InvalidCode):
        new_medication("Medication-A", code, 10)


def test_name_is_checked_before_code() -> None:
    with pytest.raises(InvalidName):
        new_medication("bad name", "bad code", 10)


def test_negative_weight_is_rejected() -> None:
    with pytest.raises(InvalidWeight):
        new_medication("Medication-A", "CODE", -1)


def test_validation_errors_share_the_taxonomy() -> None:
    with pytest.raises(ValidationError) as excinfo:
        new_medication("", "CODE", 1)
    assert excinfo.value.field == "name"
    assert excinfo.value.status_code == 400


def test_medication_is_immutable() -> None:
    medication = new_medication("Medication-A", "CODE", 10, image="aGVsbG8=")
    with pytest.raises(dataclasses.FrozenInstanceError):
        medication.weight = 20  # type: ignore[misc]


def test_to_dto_can_strip_the_image() -> None:
    medication = new_medication("Medication-A", "CODE", 10, image="aGVsbG8=")
    assert medication.to_dto().image == "aGVsbG8="
    assert medication.to_dto(include_image=False).image is None
    assert Medication.from_dto(medication.to_dto()) == medication


def test_batch_conversion_stops_at_first_failure() -> None:
    batch = new_medications(
        [
            MedicationDTO(name="Medication-A", code="A", weight=1),
            MedicationDTO(name="Medication-B", code="B", weight=2),
            MedicationDTO(name="Medication-C", code="lower", weight=3),
            MedicationDTO(name="Medication-D", code="D", weight=4),
        ]
    )

    assert not batch.ok
    assert batch.converted == 2
    assert batch.requested == 4
    assert isinstance(batch.error, InvalidCode)
    assert [item.code for item in batch.medications] == ["A", "B"]


def test_batch_conversion_of_valid_items() -> None:
    batch = new_medications([MedicationDTO(name="M", code="M", weight=5)])
    assert batch.ok
    assert batch.converted == 1
