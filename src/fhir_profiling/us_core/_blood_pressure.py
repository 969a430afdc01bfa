"""
US Core Blood Pressure profile helpers.

A blood pressure Observation is a vital sign coded LOINC 85354-9 with one
systolic (8480-6) and one diastolic (8462-4) component, both in mm[Hg].
"""

from __future__ import annotations

from typing import Any, Optional, Union

from fhir_profiling.components import Number, clear_component, set_component
from fhir_profiling.datatypes import codeable_concept, reference
from fhir_profiling.errors import InvalidArgumentError, require_dict
from fhir_profiling.profiles import assert_profile, retract_profile
from fhir_profiling.us_core._constants import (
    BLOOD_PRESSURE_PANEL,
    BLOOD_PRESSURE_PROFILE_URL,
    BLOOD_PRESSURE_UNIT,
    DIASTOLIC,
    SYSTOLIC,
)
from fhir_profiling.us_core._vital_signs import (
    set_vital_signs_category,
    set_vital_signs_profile,
)


def set_blood_pressure_profile(observation: dict[str, Any]) -> None:
    assert_profile(observation, BLOOD_PRESSURE_PROFILE_URL)


def clear_blood_pressure_profile(
    observation: dict[str, Any], *, reference_time: Optional[str] = None,
) -> None:
    retract_profile(observation, BLOOD_PRESSURE_PROFILE_URL, reference_time=reference_time)


def set_blood_pressure_code(observation: dict[str, Any]) -> None:
    """Set ``Observation.code`` to the LOINC blood pressure panel."""
    require_dict(observation, "Observation")
    observation["code"] = codeable_concept(BLOOD_PRESSURE_PANEL)


def set_systolic(observation: dict[str, Any], value: Number) -> None:
    set_component(observation, SYSTOLIC, value, BLOOD_PRESSURE_UNIT)


def clear_systolic(observation: dict[str, Any]) -> None:
    clear_component(observation, SYSTOLIC)


def set_diastolic(observation: dict[str, Any], value: Number) -> None:
    set_component(observation, DIASTOLIC, value, BLOOD_PRESSURE_UNIT)


def clear_diastolic(observation: dict[str, Any]) -> None:
    clear_component(observation, DIASTOLIC)


def _effective_element(effective: Union[str, dict[str, Any]]) -> tuple[str, Any]:
    if isinstance(effective, str) and effective:
        return "effectiveDateTime", effective
    if isinstance(effective, dict):
        bounds = [effective[key] for key in ("start", "end") if key in effective]
        if bounds and all(isinstance(b, str) and b for b in bounds):
            return "effectivePeriod", dict(effective)
    raise InvalidArgumentError(
        "effective must be an ISO-8601 dateTime string or a Period dict "
        "with a non-empty start and/or end"
    )


def create_blood_pressure(
    status: str,
    subject: Union[str, dict[str, Any]],
    effective: Union[str, dict[str, Any]],
    systolic: Number,
    diastolic: Number,
) -> dict[str, Any]:
    """Create a new Observation conforming to US Core Blood Pressure.

    Args:
        status:    Observation status code, e.g. ``"final"``.
        subject:   ``"Patient/<id>"`` or a Reference dict.
        effective: dateTime string (``effectiveDateTime``) or a Period
                   dict with ``start``/``end`` (``effectivePeriod``).
        systolic:  Systolic pressure in mm[Hg].
        diastolic: Diastolic pressure in mm[Hg].

    Raises:
        InvalidArgumentError: On an empty status, subject or an
            unsupported effective value, or non-numeric pressures.
    """
    if not isinstance(status, str) or not status:
        raise InvalidArgumentError("status must be a non-empty string")

    effective_key, effective_value = _effective_element(effective)
    observation: dict[str, Any] = {
        "resourceType": "Observation",
        "status": status,
        "subject": reference(subject),
        effective_key: effective_value,
    }

    set_vital_signs_profile(observation)
    set_vital_signs_category(observation)

    set_blood_pressure_profile(observation)
    set_blood_pressure_code(observation)
    set_systolic(observation, systolic)
    set_diastolic(observation, diastolic)

    return observation
