"""
Example 01: US Core Patient
===========================

Builds a Patient that conforms to US Core: identifier, name, gender, a
race extension, birth sex, and the profile assertion.  Reads the birth sex
back, prints the resource, then validates it before and after breaking
the name.

Use case: An intake system registers a new patient and checks the record
against US Core before sending it on.
"""

import json
import logging

from fhir_profiling.us_core import (
    BirthSex,
    OmbRaceCategory,
    add_race_omb_category,
    patient_validator,
    set_birthsex,
    set_patient_profile,
    set_race_text,
    try_get_birthsex,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# ── 1. Building the patient ──────────────────────────────────────

print("=== 1. Building a US Core Patient ===\n")

patient = {
    "resourceType": "Patient",
    # US Core requires an identifier with a system and a value
    "identifier": [{"system": "http://example.org/fhir/patient/identifier", "value": "ABC123"}],
    # ...a name with a family, a given, or a data-absent-reason
    "name": [{"given": ["Test"]}],
    # ...and a gender
    "gender": "unknown",
}

add_race_omb_category(patient, OmbRaceCategory.AMERICAN_INDIAN_OR_ALASKA_NATIVE)
set_race_text(patient, "Race default text")
set_patient_profile(patient)
set_birthsex(patient, BirthSex.FEMALE)

# ── 2. Reading an extension back ─────────────────────────────────

print("=== 2. Birth Sex ===\n")

birthsex, found = try_get_birthsex(patient)
if found:
    print(f"Found US Core Birthsex: {birthsex.name}")
else:
    print("US Core Birthsex not found!")

# ── 3. Serialized resource ───────────────────────────────────────

print("\n=== 3. Patient JSON ===\n")
print(json.dumps(patient, indent=2))

# ── 4. Validation ────────────────────────────────────────────────

print("\n=== 4. Validating ===\n")

validator = patient_validator(config={"require_profile_assertion": True})
result = validator.validate(patient)
print(f"Valid: {result.valid}")

# Drop the only given name: both name rules now fail
patient["name"] = [{"text": "no family, no given"}]
result = validator.validate(patient)
print(f"Valid after removing the given name: {result.valid}")
for failure in result.failures:
    print(f"  {failure.field}: {failure.message}")
