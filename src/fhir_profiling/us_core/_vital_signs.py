"""US Core Vital Signs profile helpers for Observation resources."""

from __future__ import annotations

from typing import Any, Optional

from fhir_profiling.datatypes import codeable_concept, concept_has_coding
from fhir_profiling.errors import require_dict
from fhir_profiling.profiles import assert_profile, retract_profile
from fhir_profiling.us_core._constants import VITAL_SIGNS, VITAL_SIGNS_PROFILE_URL


def set_vital_signs_profile(observation: dict[str, Any]) -> None:
    assert_profile(observation, VITAL_SIGNS_PROFILE_URL)


def clear_vital_signs_profile(
    observation: dict[str, Any], *, reference_time: Optional[str] = None,
) -> None:
    retract_profile(observation, VITAL_SIGNS_PROFILE_URL, reference_time=reference_time)


def set_vital_signs_category(observation: dict[str, Any]) -> None:
    """Tag the observation with the ``vital-signs`` category exactly once."""
    require_dict(observation, "Observation")
    categories = [
        concept for concept in observation.get("category") or []
        if not concept_has_coding(concept, VITAL_SIGNS.system, VITAL_SIGNS.code)
    ]
    categories.append(codeable_concept(VITAL_SIGNS))
    observation["category"] = categories
