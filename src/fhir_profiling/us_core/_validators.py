"""
Validators for the US Core Patient, Vital Signs and Blood Pressure profiles.

These cover the profile constraints that are checked by hand: required
identifiers, names and gender on Patient (including invariant us-core-8),
required category and code concepts on Observation, and the systolic and
diastolic components of a blood pressure panel.
"""

from __future__ import annotations

from typing import Any, Optional

from fhir_profiling.config import resolve_settings
from fhir_profiling.extensions import has_extension
from fhir_profiling.validation import (
    CascadeMode,
    FieldRule,
    Validator,
    coding_check,
    component_contains,
    concept_list_contains,
    element,
    must,
    not_empty,
    not_none,
    profile_asserted,
    rule_for,
)
from fhir_profiling.us_core._constants import (
    BLOOD_PRESSURE_PANEL,
    BLOOD_PRESSURE_PROFILE_URL,
    DATA_ABSENT_REASON_URL,
    DIASTOLIC,
    PATIENT_PROFILE_URL,
    SYSTOLIC,
    VITAL_SIGNS,
    VITAL_SIGNS_PROFILE_URL,
)

IDENTIFIER_MESSAGE = "Patient.identifier requires one element with both a system and a value."
NAME_ANY_MESSAGE = "Patient.name requires one name with a family, given, or Data Absent Reason."
NAME_ALL_MESSAGE = "Patient.name requires all names have a family, given, or Data Absent Reason."
GENDER_MESSAGE = "Patient.gender is required."


def passes_us_core_8(name: Any) -> bool:
    """Invariant us-core-8: a name has a family, a given, or a data-absent-reason."""
    if not isinstance(name, dict):
        return False
    if name.get("family"):
        return True
    if any(isinstance(given, str) and given for given in name.get("given") or []):
        return True
    return has_extension(name, DATA_ABSENT_REASON_URL)


def _has_system_and_value(identifier: Any) -> bool:
    return isinstance(identifier, dict) and bool(identifier.get("system")) and bool(identifier.get("value"))


def _profile_rule(resource_type: str, profile_url: str) -> FieldRule:
    return rule_for(
        f"{resource_type}.meta.profile",
        lambda resource: (resource.get("meta") or {}).get("profile"),
        profile_asserted(profile_url),
    )


def patient_validator(*, config: Optional[dict[str, Any]] = None) -> Validator:
    """Build the US Core Patient validator."""
    settings = resolve_settings(config)
    rules: list[Any] = []
    if settings["require_profile_assertion"]:
        rules.append(_profile_rule("Patient", PATIENT_PROFILE_URL))

    rules.extend([
        rule_for(
            "Patient.identifier", element("identifier"),
            not_none(IDENTIFIER_MESSAGE),
            not_empty(IDENTIFIER_MESSAGE),
            must(lambda ids: any(_has_system_and_value(i) for i in ids), IDENTIFIER_MESSAGE),
            cascade=CascadeMode.STOP,
        ),
        rule_for(
            "Patient.name", element("name"),
            must(lambda names: any(passes_us_core_8(n) for n in names or []), NAME_ANY_MESSAGE),
        ),
        rule_for(
            "Patient.name", element("name"),
            must(lambda names: all(passes_us_core_8(n) for n in names or []), NAME_ALL_MESSAGE),
        ),
        rule_for("Patient.gender", element("gender"), not_none(GENDER_MESSAGE)),
    ])
    return Validator("UsCorePatient", rules)


def vital_signs_validator(*, config: Optional[dict[str, Any]] = None) -> Validator:
    """Build the US Core Vital Signs validator."""
    settings = resolve_settings(config)
    rules: list[Any] = []
    if settings["require_profile_assertion"]:
        rules.append(_profile_rule("Observation", VITAL_SIGNS_PROFILE_URL))
    rules.append(rule_for(
        "Observation.category", element("category"),
        concept_list_contains(VITAL_SIGNS.system, VITAL_SIGNS.code),
    ))
    return Validator("UsCoreVitalSigns", rules)


def _component_message(kind_code: str) -> str:
    return f"UsCoreBloodPressure requires a component: {SYSTOLIC.system}#{kind_code}"


def blood_pressure_validator(*, config: Optional[dict[str, Any]] = None) -> Validator:
    """Build the US Core Blood Pressure validator (includes Vital Signs)."""
    settings = resolve_settings(config)
    rules: list[Any] = [vital_signs_validator(config=config)]
    if settings["require_profile_assertion"]:
        rules.append(_profile_rule("Observation", BLOOD_PRESSURE_PROFILE_URL))
    rules.extend([
        rule_for("Observation.code", element("code"), coding_check(BLOOD_PRESSURE_PANEL)),
        rule_for(
            "Observation.component", element("component"),
            component_contains(SYSTOLIC.system, SYSTOLIC.code, _component_message(SYSTOLIC.code)),
            component_contains(DIASTOLIC.system, DIASTOLIC.code, _component_message(DIASTOLIC.code)),
        ),
    ])
    return Validator("UsCoreBloodPressure", rules)
