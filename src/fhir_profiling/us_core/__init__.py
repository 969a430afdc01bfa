"""
US Core (STU) profile helpers and validators for FHIR R4.

Write path: assert profiles and set profile-specific elements on
Patient and Observation resources (JSON-parsed dicts, modified in place):

  - Patient:        profile, birth sex extension, race extension
  - Vital Signs:    profile, ``vital-signs`` category
  - Blood Pressure: profile, panel code, systolic/diastolic components,
                    ``create_blood_pressure()`` convenience constructor

Verify path: ``patient_validator()``, ``vital_signs_validator()`` and
``blood_pressure_validator()`` build rule sets that check the hand-rolled
subset of each profile's constraints.  Validators only read.

References:
  - US Core Implementation Guide: http://hl7.org/fhir/us/core/
"""

from fhir_profiling.us_core._constants import (
    PATIENT_PROFILE_URL,
    VITAL_SIGNS_PROFILE_URL,
    BLOOD_PRESSURE_PROFILE_URL,
    BIRTHSEX_EXTENSION_URL,
    RACE_EXTENSION_URL,
    DATA_ABSENT_REASON_URL,
    RACE_OMB_CATEGORY,
    RACE_DETAILED,
    RACE_TEXT,
    CDC_REC_SYSTEM,
    NULL_FLAVOR_SYSTEM,
    LOINC_SYSTEM,
    OBSERVATION_CATEGORY_SYSTEM,
    LOINC_BLOOD_PRESSURE_PANEL,
    LOINC_SYSTOLIC,
    LOINC_DIASTOLIC,
    VITAL_SIGNS_CATEGORY,
    BLOOD_PRESSURE_PANEL,
    SYSTOLIC,
    DIASTOLIC,
    VITAL_SIGNS,
    BLOOD_PRESSURE_UNIT,
)
from fhir_profiling.us_core._patient import (
    set_patient_profile,
    clear_patient_profile,
)
from fhir_profiling.us_core._birthsex import (
    BirthSex,
    BIRTHSEX_CODEC,
    set_birthsex,
    try_get_birthsex,
    clear_birthsex,
)
from fhir_profiling.us_core._race import (
    OmbRaceCategory,
    OMB_CATEGORY_CODEC,
    set_race,
    add_race_omb_category,
    set_race_text,
    try_get_race_text,
    get_race_omb_categories,
    get_race_detailed,
    clear_race,
)
from fhir_profiling.us_core._vital_signs import (
    set_vital_signs_profile,
    clear_vital_signs_profile,
    set_vital_signs_category,
)
from fhir_profiling.us_core._blood_pressure import (
    set_blood_pressure_profile,
    clear_blood_pressure_profile,
    set_blood_pressure_code,
    set_systolic,
    clear_systolic,
    set_diastolic,
    clear_diastolic,
    create_blood_pressure,
)
from fhir_profiling.us_core._validators import (
    IDENTIFIER_MESSAGE,
    NAME_ANY_MESSAGE,
    NAME_ALL_MESSAGE,
    GENDER_MESSAGE,
    passes_us_core_8,
    patient_validator,
    vital_signs_validator,
    blood_pressure_validator,
)

__all__ = [
    # Constants
    "PATIENT_PROFILE_URL",
    "VITAL_SIGNS_PROFILE_URL",
    "BLOOD_PRESSURE_PROFILE_URL",
    "BIRTHSEX_EXTENSION_URL",
    "RACE_EXTENSION_URL",
    "DATA_ABSENT_REASON_URL",
    "RACE_OMB_CATEGORY",
    "RACE_DETAILED",
    "RACE_TEXT",
    "CDC_REC_SYSTEM",
    "NULL_FLAVOR_SYSTEM",
    "LOINC_SYSTEM",
    "OBSERVATION_CATEGORY_SYSTEM",
    "LOINC_BLOOD_PRESSURE_PANEL",
    "LOINC_SYSTOLIC",
    "LOINC_DIASTOLIC",
    "VITAL_SIGNS_CATEGORY",
    "BLOOD_PRESSURE_PANEL",
    "SYSTOLIC",
    "DIASTOLIC",
    "VITAL_SIGNS",
    "BLOOD_PRESSURE_UNIT",
    # Patient
    "set_patient_profile",
    "clear_patient_profile",
    # Birth sex
    "BirthSex",
    "BIRTHSEX_CODEC",
    "set_birthsex",
    "try_get_birthsex",
    "clear_birthsex",
    # Race
    "OmbRaceCategory",
    "OMB_CATEGORY_CODEC",
    "set_race",
    "add_race_omb_category",
    "set_race_text",
    "try_get_race_text",
    "get_race_omb_categories",
    "get_race_detailed",
    "clear_race",
    # Vital signs
    "set_vital_signs_profile",
    "clear_vital_signs_profile",
    "set_vital_signs_category",
    # Blood pressure
    "set_blood_pressure_profile",
    "clear_blood_pressure_profile",
    "set_blood_pressure_code",
    "set_systolic",
    "clear_systolic",
    "set_diastolic",
    "clear_diastolic",
    "create_blood_pressure",
    # Validators
    "IDENTIFIER_MESSAGE",
    "NAME_ANY_MESSAGE",
    "NAME_ALL_MESSAGE",
    "GENDER_MESSAGE",
    "passes_us_core_8",
    "patient_validator",
    "vital_signs_validator",
    "blood_pressure_validator",
]
