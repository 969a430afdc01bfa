"""
Replace-by-kind handling of ``Observation.component``.

A component is identified by a coding in its ``code`` concept (its
"kind").  Setting a kind removes every component of that kind before
appending the new one, so an observation never carries two components of
the same kind.  Components without a usable code are left untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from fhir_profiling.datatypes import (
    Coding,
    codeable_concept,
    concept_has_coding,
    quantity,
)
from fhir_profiling.errors import require_dict

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _is_kind(component: Any, kind: Coding) -> bool:
    return isinstance(component, dict) and concept_has_coding(
        component.get("code"), kind.system, kind.code,
    )


def get_component(observation: dict[str, Any], kind: Coding) -> Optional[dict[str, Any]]:
    """Return the first component of *kind*, or None."""
    require_dict(observation, "Observation")
    for component in observation.get("component") or []:
        if _is_kind(component, kind):
            return component
    return None


def get_component_value(
    observation: dict[str, Any], kind: Coding,
) -> tuple[Optional[Number], bool]:
    """Return ``(valueQuantity.value, True)`` for *kind*, else ``(None, False)``."""
    component = get_component(observation, kind)
    if component is None:
        return None, False
    value = (component.get("valueQuantity") or {}).get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None, False
    return value, True


def clear_component(observation: dict[str, Any], kind: Coding) -> None:
    """Remove every component of *kind*."""
    require_dict(observation, "Observation")
    existing = observation.get("component")
    if not existing:
        return
    kept = [c for c in existing if not _is_kind(c, kind)]
    if len(kept) == len(existing):
        return
    logger.debug("Removed %d component(s) %s#%s", len(existing) - len(kept), kind.system, kind.code)
    if kept:
        observation["component"] = kept
    else:
        del observation["component"]


def set_component(
    observation: dict[str, Any],
    kind: Coding,
    value: Number,
    unit: str,
) -> None:
    """Replace any component of *kind* with one holding *value* *unit*."""
    require_dict(observation, "Observation")
    new_component = {
        "code": codeable_concept(Coding(kind.system, kind.code)),
        "valueQuantity": quantity(value, unit),
    }
    clear_component(observation, kind)
    observation.setdefault("component", []).append(new_component)
    logger.debug("Set component %s#%s = %s %s", kind.system, kind.code, value, unit)
