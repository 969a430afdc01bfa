"""Exception types raised by fhir-profiling.

Only programming errors are raised.  Missing extensions are reported as
``None`` / ``(None, False)`` returns and conformance problems as
``ValidationFailure`` records, never as exceptions.
"""

from __future__ import annotations


class ProfilingError(Exception):
    """Base class for all fhir-profiling errors."""


class InvalidArgumentError(ProfilingError, ValueError):
    """A required argument was None, empty, or of the wrong type."""


class DomainMappingError(ProfilingError, ValueError):
    """An enumeration value has no registered coded-value mapping."""


def require_dict(value: object, what: str = "FHIR element") -> dict:
    """Return *value* if it is a dict, else raise ``InvalidArgumentError``."""
    if value is None:
        raise InvalidArgumentError(f"{what} must not be None")
    if not isinstance(value, dict):
        raise InvalidArgumentError(
            f"{what} must be a dict, got: {type(value).__name__}"
        )
    return value
