"""US Core Patient profile assertion."""

from __future__ import annotations

from typing import Any, Optional

from fhir_profiling.profiles import assert_profile, retract_profile
from fhir_profiling.us_core._constants import PATIENT_PROFILE_URL


def set_patient_profile(patient: dict[str, Any]) -> None:
    """Assert conformance to US Core Patient."""
    assert_profile(patient, PATIENT_PROFILE_URL)


def clear_patient_profile(
    patient: dict[str, Any], *, reference_time: Optional[str] = None,
) -> None:
    """Retract conformance to US Core Patient."""
    retract_profile(patient, PATIENT_PROFILE_URL, reference_time=reference_time)
