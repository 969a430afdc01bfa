"""
Enumeration ↔ extension-value codecs.

An ``EnumCodec`` ties one extension url to a total table from a Python
``Enum`` to the value stored on the wire.  Encoding an unmapped value is
a programming error and raises ``DomainMappingError``; decoding data that
is absent, malformed or carries an unknown code is a normal state and
yields ``(None, False)``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Mapping, Optional, TypeVar

from fhir_profiling.datatypes import Coding, ExtensionValue
from fhir_profiling.errors import DomainMappingError
from fhir_profiling.extensions import (
    get_extension_value,
    remove_extension,
    set_extension,
)

E = TypeVar("E", bound=Enum)


class EnumCodec(Generic[E]):
    """Bidirectional mapping between an ``Enum`` and extension values."""

    def __init__(self, url: str, table: Mapping[E, ExtensionValue]):
        if not table:
            raise DomainMappingError(f"Empty mapping table for {url}")
        enum_type = type(next(iter(table)))
        missing = [m for m in enum_type if m not in table]
        if missing:
            raise DomainMappingError(
                f"No mapping for {', '.join(str(m) for m in missing)} in {url}"
            )
        self.url = url
        self.enum_type = enum_type
        self._table: dict[E, ExtensionValue] = dict(table)

    def __repr__(self) -> str:
        return f"EnumCodec({self.url!r}, {self.enum_type.__name__})"

    # ── Pure mapping ──────────────────────────────────────────────

    def encode(self, member: E) -> ExtensionValue:
        """Map *member* to its extension value.

        Raises:
            DomainMappingError: If *member* has no registered value.
        """
        try:
            return self._table[member]
        except (KeyError, TypeError):
            raise DomainMappingError(
                f"No {self.enum_type.__name__} mapping for {member!r}"
            ) from None

    def decode(self, value: Any) -> Optional[E]:
        """Map an extension value back to its member, or None if unknown.

        Codings are matched on (system, code); display text is ignored.
        """
        if value is None:
            return None
        for member, mapped in self._table.items():
            if isinstance(mapped, Coding):
                if isinstance(value, Coding) and mapped.matches(value.system, value.code):
                    return member
            elif mapped == value:
                return member
        return None

    # ── Element operations ────────────────────────────────────────

    def set(self, element: dict[str, Any], member: E) -> None:
        set_extension(element, self.url, self.encode(member))

    def try_get(self, element: dict[str, Any]) -> tuple[Optional[E], bool]:
        member = self.decode(get_extension_value(element, self.url))
        return member, member is not None

    def clear(self, element: dict[str, Any]) -> None:
        remove_extension(element, self.url)
