"""
US Core Race extension.

A complex extension with three kinds of children:

  - ``text``: 1..1 free text, always replaced
  - ``ombCategory``: 0..6 OMB race categories (CDC REC or null flavor)
  - ``detailed``: 0..* detailed CDC REC codings

OMB categories accumulate without duplicates.  The null-flavor codes
(``UNK``, ``ASKU``) only ever stand alone: they are evicted as soon as a
concrete category is added, and cannot be added next to one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Optional

from fhir_profiling.codecs import EnumCodec
from fhir_profiling.config import resolve_settings
from fhir_profiling.datatypes import Coding, String
from fhir_profiling.errors import InvalidArgumentError
from fhir_profiling.extensions import (
    Extension,
    find_extension_element,
    get_extension,
    remove_extension,
    set_extension,
)
from fhir_profiling.us_core._constants import (
    CDC_REC_SYSTEM,
    NULL_FLAVOR_SYSTEM,
    RACE_DETAILED,
    RACE_EXTENSION_URL,
    RACE_OMB_CATEGORY,
    RACE_PLACEHOLDER_CODES,
    RACE_TEXT,
)

logger = logging.getLogger(__name__)


class OmbRaceCategory(Enum):
    """OMB race categories, http://hl7.org/fhir/us/core/ValueSet-omb-race-category.html"""

    AMERICAN_INDIAN_OR_ALASKA_NATIVE = "1002-5"
    ASIAN = "2028-9"
    BLACK_OR_AFRICAN_AMERICAN = "2054-5"
    NATIVE_HAWAIIAN_OR_OTHER_PACIFIC_ISLANDER = "2076-8"
    WHITE = "2106-3"
    UNKNOWN = "UNK"
    ASKED_BUT_NO_ANSWER = "ASKU"


# Children of the race extension, so the url is the relative sub-extension url.
OMB_CATEGORY_CODEC: EnumCodec[OmbRaceCategory] = EnumCodec(
    RACE_OMB_CATEGORY,
    {
        OmbRaceCategory.AMERICAN_INDIAN_OR_ALASKA_NATIVE: Coding(
            CDC_REC_SYSTEM, "1002-5", "American Indian or Alaska Native"),
        OmbRaceCategory.ASIAN: Coding(CDC_REC_SYSTEM, "2028-9", "Asian"),
        OmbRaceCategory.BLACK_OR_AFRICAN_AMERICAN: Coding(
            CDC_REC_SYSTEM, "2054-5", "Black or African American"),
        OmbRaceCategory.NATIVE_HAWAIIAN_OR_OTHER_PACIFIC_ISLANDER: Coding(
            CDC_REC_SYSTEM, "2076-8", "Native Hawaiian or Other Pacific Islander"),
        OmbRaceCategory.WHITE: Coding(CDC_REC_SYSTEM, "2106-3", "White"),
        OmbRaceCategory.UNKNOWN: Coding(NULL_FLAVOR_SYSTEM, "UNK", "Unknown"),
        OmbRaceCategory.ASKED_BUT_NO_ANSWER: Coding(
            NULL_FLAVOR_SYSTEM, "ASKU", "Asked but no answer"),
    },
)


def _omb_code(node: dict[str, Any]) -> Optional[str]:
    value = node.get("valueCoding")
    if isinstance(value, dict) and isinstance(value.get("code"), str):
        return value["code"]
    return None


def _require_text(text: Any) -> str:
    if not isinstance(text, str) or not text:
        raise InvalidArgumentError("Race text must be a non-empty string")
    return text


def set_race(
    patient: dict[str, Any],
    text: str,
    omb_categories: Optional[Iterable[OmbRaceCategory]] = None,
    detailed: Optional[Iterable[Coding]] = None,
) -> None:
    """Replace the race extension with one built from the given values.

    Raises:
        InvalidArgumentError: If *text* is empty or a detailed entry is
            not a ``Coding``.
        DomainMappingError: If a category has no registered coding.
    """
    _require_text(text)

    children = [Extension(RACE_TEXT, String(text))]
    for category in omb_categories or ():
        children.append(Extension(RACE_OMB_CATEGORY, OMB_CATEGORY_CODEC.encode(category)))
    for coding in detailed or ():
        if not isinstance(coding, Coding):
            raise InvalidArgumentError(
                f"Detailed race entries must be Coding, got: {type(coding).__name__}"
            )
        children.append(Extension(RACE_DETAILED, coding))

    set_extension(patient, RACE_EXTENSION_URL, Extension(RACE_EXTENSION_URL, extension=children))


def add_race_omb_category(
    patient: dict[str, Any],
    category: OmbRaceCategory,
    *,
    config: Optional[dict[str, Any]] = None,
) -> None:
    """Add an OMB category to the patient's race extension.

    - Creates the race extension (with placeholder text) if absent.
    - A category whose code is already present is not added again.
    - Existing ``UNK``/``ASKU`` categories are dropped when any other
      category is added.
    - ``UNK``/``ASKU`` is not added while a concrete category is present.

    Raises:
        DomainMappingError: If *category* has no registered coding.
    """
    settings = resolve_settings(config)
    coding = OMB_CATEGORY_CODEC.encode(category)

    race = find_extension_element(patient, RACE_EXTENSION_URL)
    if race is None:
        set_race(patient, settings["race_placeholder_text"], [category])
        return

    others: list[Any] = []
    retained: list[dict[str, Any]] = []
    for child in race.get("extension") or []:
        if not (isinstance(child, dict) and child.get("url") == RACE_OMB_CATEGORY):
            others.append(child)
            continue
        code = _omb_code(child)
        if code is None:
            logger.warning("Keeping race ombCategory without a code: %r", child)
            retained.append(child)
            continue
        if code == coding.code:
            return
        if code in RACE_PLACEHOLDER_CODES:
            continue
        retained.append(child)

    if retained and coding.code in RACE_PLACEHOLDER_CODES:
        logger.debug("Not adding %s next to concrete race categories", coding.code)
        return

    # kept nodes go back as stored, only the new category is built here
    new_node = Extension(RACE_OMB_CATEGORY, coding).to_fhir()
    race["extension"] = others + retained + [new_node]
    logger.debug("Added race ombCategory %s", coding.code)


def set_race_text(patient: dict[str, Any], text: str) -> None:
    """Set the race text, creating the race extension if needed."""
    _require_text(text)
    race = find_extension_element(patient, RACE_EXTENSION_URL)
    if race is None:
        set_race(patient, text)
        return
    set_extension(race, RACE_TEXT, String(text))


def try_get_race_text(patient: dict[str, Any]) -> tuple[Optional[str], bool]:
    race = get_extension(patient, RACE_EXTENSION_URL)
    if race is None:
        return None, False
    for child in race.extension:
        if child.url == RACE_TEXT and isinstance(child.value, String):
            return child.value.value, True
    return None, False


def get_race_omb_categories(patient: dict[str, Any]) -> list[OmbRaceCategory]:
    """Decoded OMB categories in stored order; unknown codes are skipped."""
    race = get_extension(patient, RACE_EXTENSION_URL)
    if race is None:
        return []
    categories = []
    for child in race.extension:
        if child.url != RACE_OMB_CATEGORY:
            continue
        category = OMB_CATEGORY_CODEC.decode(child.value)
        if category is not None:
            categories.append(category)
    return categories


def get_race_detailed(patient: dict[str, Any]) -> list[Coding]:
    race = get_extension(patient, RACE_EXTENSION_URL)
    if race is None:
        return []
    return [
        child.value for child in race.extension
        if child.url == RACE_DETAILED and isinstance(child.value, Coding)
    ]


def clear_race(patient: dict[str, Any]) -> None:
    remove_extension(patient, RACE_EXTENSION_URL)
