"""
FHIR R4 data types used by the profile helpers.

Resources themselves stay JSON-parsed ``dict`` objects.  The small
immutable types here describe the values that go *into* them: codings,
and the scalar values an extension can carry.  Extension values form a
closed variant (``Coding | Code | String``) so that callers dispatch on
the Python type instead of probing ``value[x]`` keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from fhir_profiling.errors import InvalidArgumentError


@dataclass(frozen=True)
class Coding:
    """A (system, code, display) triple from a controlled vocabulary."""

    system: str
    code: str
    display: Optional[str] = None

    def matches(self, system: Optional[str], code: Optional[str]) -> bool:
        """Return True when *system* and *code* are both equal to ours."""
        return self.system == system and self.code == code

    def to_fhir(self) -> dict[str, Any]:
        out: dict[str, Any] = {"system": self.system, "code": self.code}
        if self.display is not None:
            out["display"] = self.display
        return out

    @classmethod
    def from_fhir(cls, data: Any) -> Optional["Coding"]:
        """Build a Coding from a FHIR dict, or None when malformed."""
        if not isinstance(data, dict):
            return None
        system = data.get("system")
        code = data.get("code")
        if not isinstance(system, str) or not isinstance(code, str):
            return None
        display = data.get("display")
        return cls(system, code, display if isinstance(display, str) else None)


@dataclass(frozen=True)
class Code:
    """A bare FHIR ``code`` primitive (``valueCode``)."""

    value: str


@dataclass(frozen=True)
class String:
    """A FHIR ``string`` primitive (``valueString``)."""

    value: str


ExtensionValue = Union[Coding, Code, String]


# ── value[x] serialization ────────────────────────────────────────


def extension_value_to_fhir(value: ExtensionValue) -> tuple[str, Any]:
    """Return the ``(value[x] key, payload)`` pair for an extension value."""
    if isinstance(value, Coding):
        return "valueCoding", value.to_fhir()
    if isinstance(value, Code):
        return "valueCode", value.value
    if isinstance(value, String):
        return "valueString", value.value
    raise InvalidArgumentError(
        f"Unsupported extension value type: {type(value).__name__}"
    )


def extension_value_from_fhir(ext: dict[str, Any]) -> Optional[ExtensionValue]:
    """Read the typed value of an extension dict.

    Returns None when the extension has no value, or carries a value[x]
    kind this package does not model.
    """
    if "valueCoding" in ext:
        return Coding.from_fhir(ext["valueCoding"])
    if isinstance(ext.get("valueCode"), str):
        return Code(ext["valueCode"])
    if isinstance(ext.get("valueString"), str):
        return String(ext["valueString"])
    return None


# ── Complex type builders ─────────────────────────────────────────


def codeable_concept(*codings: Coding, text: Optional[str] = None) -> dict[str, Any]:
    """Build a CodeableConcept dict from one or more codings."""
    concept: dict[str, Any] = {"coding": [c.to_fhir() for c in codings]}
    if text:
        concept["text"] = text
    return concept


def concept_has_coding(concept: Any, system: str, code: str) -> bool:
    """True when *concept* holds a coding with exactly *system* and *code*.

    Tolerates None, a missing or empty ``coding`` list and malformed
    entries; all of those simply do not match.
    """
    if not isinstance(concept, dict):
        return False
    for raw in concept.get("coding") or []:
        coding = Coding.from_fhir(raw)
        if coding is not None and coding.matches(system, code):
            return True
    return False


def quantity(value: Union[int, float], unit: str) -> dict[str, Any]:
    """Build a Quantity dict.

    Raises:
        InvalidArgumentError: If *value* is not a real number (bool is
            rejected even though it subclasses int).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(
            f"Quantity value must be a number, got: {type(value).__name__}"
        )
    return {"value": value, "unit": unit}


def reference(target: Union[str, dict[str, Any]]) -> dict[str, Any]:
    """Build a Reference dict from ``"Type/id"`` or pass a dict through."""
    if isinstance(target, dict):
        if not target:
            raise InvalidArgumentError("Reference must not be empty")
        return dict(target)
    if not isinstance(target, str) or not target:
        raise InvalidArgumentError("Reference must be a non-empty string or dict")
    return {"reference": target}
