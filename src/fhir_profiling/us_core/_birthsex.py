"""
US Core Birth Sex extension (``valueCode`` from the ONC birth sex value set).

http://hl7.org/fhir/us/core/ValueSet-birthsex.html
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from fhir_profiling.codecs import EnumCodec
from fhir_profiling.datatypes import Code
from fhir_profiling.us_core._constants import BIRTHSEX_EXTENSION_URL


class BirthSex(Enum):
    FEMALE = "F"
    MALE = "M"
    UNKNOWN = "UNK"  # a proper value is applicable, but not known


BIRTHSEX_CODEC: EnumCodec[BirthSex] = EnumCodec(
    BIRTHSEX_EXTENSION_URL,
    {
        BirthSex.FEMALE: Code("F"),
        BirthSex.MALE: Code("M"),
        BirthSex.UNKNOWN: Code("UNK"),
    },
)


def set_birthsex(patient: dict[str, Any], birthsex: Optional[BirthSex]) -> None:
    """Set the birth sex extension; ``None`` removes it.

    Raises:
        DomainMappingError: If *birthsex* is neither None nor a ``BirthSex``.
    """
    if birthsex is None:
        BIRTHSEX_CODEC.clear(patient)
        return
    BIRTHSEX_CODEC.set(patient, birthsex)


def try_get_birthsex(patient: dict[str, Any]) -> tuple[Optional[BirthSex], bool]:
    """Return ``(BirthSex, True)``, or ``(None, False)`` if absent or unknown."""
    return BIRTHSEX_CODEC.try_get(patient)


def clear_birthsex(patient: dict[str, Any]) -> None:
    BIRTHSEX_CODEC.clear(patient)
