"""
Extension tree primitives for FHIR R4 elements.

Any FHIR element (a resource, a HumanName, or a complex extension) may
carry an ``extension`` list of ``{"url": ..., "value[x]": ...}`` dicts,
where a complex extension nests further extensions instead of holding a
value.  Several nodes may share a url; whether a url is a singleton or
repeatable is decided by the caller:

  - ``set_extension``: singleton replace (remove all, append one)
  - ``add_extension``: append, no duplicate check
  - ``remove_extension``: remove all nodes with the url

Reads return typed ``Extension`` views; a missing node is ``None`` or an
empty list, never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from fhir_profiling.datatypes import (
    ExtensionValue,
    extension_value_from_fhir,
    extension_value_to_fhir,
)
from fhir_profiling.errors import InvalidArgumentError, require_dict

logger = logging.getLogger(__name__)


@dataclass
class Extension:
    """One extension node: a scalar value or an ordered list of children."""

    url: str
    value: Optional[ExtensionValue] = None
    extension: list["Extension"] = field(default_factory=list)

    def to_fhir(self) -> dict[str, Any]:
        out: dict[str, Any] = {"url": self.url}
        if self.extension:
            out["extension"] = [child.to_fhir() for child in self.extension]
        if self.value is not None:
            key, payload = extension_value_to_fhir(self.value)
            out[key] = payload
        return out

    @classmethod
    def from_fhir(cls, data: dict[str, Any]) -> "Extension":
        children = [
            cls.from_fhir(child)
            for child in data.get("extension") or []
            if isinstance(child, dict) and isinstance(child.get("url"), str)
        ]
        return cls(
            url=data["url"],
            value=extension_value_from_fhir(data),
            extension=children,
        )


# ── Internal helpers ──────────────────────────────────────────────


def _require_url(url: Any) -> str:
    if not isinstance(url, str) or not url:
        raise InvalidArgumentError("Extension url must be a non-empty string")
    return url


def _raw_nodes(element: dict[str, Any], url: str) -> list[dict[str, Any]]:
    return [
        ext for ext in element.get("extension") or []
        if isinstance(ext, dict) and ext.get("url") == url
    ]


def _to_node(url: str, value: Union[ExtensionValue, Extension]) -> dict[str, Any]:
    if isinstance(value, Extension):
        if value.url != url:
            raise InvalidArgumentError(
                f"Extension url '{value.url}' does not match '{url}'"
            )
        return value.to_fhir()
    return Extension(url, value).to_fhir()


# ── Read operations ───────────────────────────────────────────────


def get_extension(element: dict[str, Any], url: str) -> Optional[Extension]:
    """Return the first extension with *url*, or None."""
    require_dict(element)
    nodes = _raw_nodes(element, _require_url(url))
    return Extension.from_fhir(nodes[0]) if nodes else None


def get_extensions(element: dict[str, Any], url: str) -> list[Extension]:
    """Return every extension with *url*, in insertion order."""
    require_dict(element)
    return [Extension.from_fhir(node) for node in _raw_nodes(element, _require_url(url))]


def get_extension_value(element: dict[str, Any], url: str) -> Optional[ExtensionValue]:
    """Return the value of the first extension with *url*, or None."""
    ext = get_extension(element, url)
    return ext.value if ext is not None else None


def has_extension(element: dict[str, Any], url: str) -> bool:
    require_dict(element)
    return bool(_raw_nodes(element, _require_url(url)))


# ── Write operations ──────────────────────────────────────────────


def remove_extension(element: dict[str, Any], url: str) -> None:
    """Remove every extension with *url*.

    An ``extension`` list left empty is dropped from the element.
    """
    require_dict(element)
    _require_url(url)
    existing = element.get("extension")
    if not existing:
        return
    kept = [ext for ext in existing if not (isinstance(ext, dict) and ext.get("url") == url)]
    if len(kept) != len(existing):
        logger.debug("Removed %d extension(s) %s", len(existing) - len(kept), url)
    if kept:
        element["extension"] = kept
    else:
        del element["extension"]


def add_extension(
    element: dict[str, Any],
    url: str,
    value: Union[ExtensionValue, Extension],
) -> None:
    """Append an extension with *url*, even if one already exists."""
    require_dict(element)
    node = _to_node(_require_url(url), value)
    element.setdefault("extension", []).append(node)


def set_extension(
    element: dict[str, Any],
    url: str,
    value: Union[ExtensionValue, Extension],
) -> None:
    """Replace all extensions with *url* by a single node holding *value*."""
    require_dict(element)
    node = _to_node(_require_url(url), value)
    remove_extension(element, url)
    element.setdefault("extension", []).append(node)
    logger.debug("Set extension %s", url)


def find_extension_element(element: dict[str, Any], url: str) -> Optional[dict[str, Any]]:
    """Return the live dict of the first extension with *url*, or None.

    For editing the children of a complex extension in place with the
    functions above; read values through ``get_extension`` instead.
    """
    require_dict(element)
    nodes = _raw_nodes(element, _require_url(url))
    return nodes[0] if nodes else None
