"""
Canonical URLs, code systems and codes for the US Core profiles.

References:
  - US Core Patient:        http://hl7.org/fhir/us/core/StructureDefinition-us-core-patient.html
  - US Core Birth Sex:      http://hl7.org/fhir/us/core/StructureDefinition-us-core-birthsex.html
  - US Core Race:           http://hl7.org/fhir/us/core/StructureDefinition-us-core-race.html
  - US Core Vital Signs:    http://hl7.org/fhir/us/core/StructureDefinition-us-core-vital-signs.html
  - US Core Blood Pressure: http://hl7.org/fhir/us/core/StructureDefinition-us-core-blood-pressure.html
"""

from __future__ import annotations

from fhir_profiling.datatypes import Coding

# ── Profiles ───────────────────────────────────────────────────────

PATIENT_PROFILE_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-patient"
VITAL_SIGNS_PROFILE_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-vital-signs"
BLOOD_PRESSURE_PROFILE_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-blood-pressure"

# ── Extensions ─────────────────────────────────────────────────────

BIRTHSEX_EXTENSION_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-birthsex"
RACE_EXTENSION_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-race"
DATA_ABSENT_REASON_URL = "http://hl7.org/fhir/StructureDefinition/data-absent-reason"

# us-core-race sub-extensions
RACE_OMB_CATEGORY = "ombCategory"
RACE_DETAILED = "detailed"
RACE_TEXT = "text"

# ── Code systems ───────────────────────────────────────────────────

CDC_REC_SYSTEM = "urn:oid:2.16.840.1.113883.6.238"
NULL_FLAVOR_SYSTEM = "http://terminology.hl7.org/CodeSystem/v3-NullFlavor"
LOINC_SYSTEM = "http://loinc.org"
OBSERVATION_CATEGORY_SYSTEM = "http://terminology.hl7.org/CodeSystem/observation-category"

# ── Codes ──────────────────────────────────────────────────────────

LOINC_BLOOD_PRESSURE_PANEL = "85354-9"
LOINC_SYSTOLIC = "8480-6"
LOINC_DIASTOLIC = "8462-4"
VITAL_SIGNS_CATEGORY = "vital-signs"

BLOOD_PRESSURE_PANEL = Coding(LOINC_SYSTEM, LOINC_BLOOD_PRESSURE_PANEL)
SYSTOLIC = Coding(LOINC_SYSTEM, LOINC_SYSTOLIC)
DIASTOLIC = Coding(LOINC_SYSTEM, LOINC_DIASTOLIC)
VITAL_SIGNS = Coding(OBSERVATION_CATEGORY_SYSTEM, VITAL_SIGNS_CATEGORY)

BLOOD_PRESSURE_UNIT = "mm[Hg]"

# Null-flavor race codes that give way to any concrete OMB category
RACE_PLACEHOLDER_CODES = frozenset({"UNK", "ASKU"})
