"""
Example 02: US Core Blood Pressure
==================================

Creates a blood pressure Observation conforming to US Core Vital Signs
and US Core Blood Pressure, validates it, then removes the diastolic
component and validates again.

Use case: A home blood pressure cuff uploads a reading; the gateway
rejects readings that lost a component on the way.
"""

import json

from fhir_profiling.components import get_component_value
from fhir_profiling.us_core import (
    DIASTOLIC,
    SYSTOLIC,
    blood_pressure_validator,
    clear_diastolic,
    create_blood_pressure,
)

# ── 1. Creating the observation ──────────────────────────────────

print("=== 1. Creating a Blood Pressure Observation ===\n")

observation = create_blood_pressure(
    status="final",
    subject="Patient/example",
    effective="2024-05-01T10:00:00Z",
    systolic=100,
    diastolic=70,
)
print(json.dumps(observation, indent=2))

systolic, _ = get_component_value(observation, SYSTOLIC)
diastolic, _ = get_component_value(observation, DIASTOLIC)
print(f"\nReading: {systolic}/{diastolic} mm[Hg]")

# ── 2. Validation ────────────────────────────────────────────────

print("\n=== 2. Validating ===\n")

validator = blood_pressure_validator()
result = validator.validate(observation)
print(f"Valid: {result.valid}")

# ── 3. A reading missing its diastolic component ─────────────────

print("\n=== 3. Removing the Diastolic Component ===\n")

clear_diastolic(observation)
result = validator.validate(observation)
print(f"Valid: {result.valid}")
for failure in result.failures:
    print(f"  {failure.field}: {failure.message}")
# Observation.component: UsCoreBloodPressure requires a component: http://loinc.org#8462-4
