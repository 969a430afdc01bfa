"""
Profile conformance assertions on ``Resource.meta.profile``.

``meta.profile`` is an ordered list of canonical URLs, treated as opaque
tokens.  Asserting is idempotent and never disturbs unrelated entries.
Retracting also stamps ``meta.lastUpdated``, so ``meta`` is never left as
an empty object after a removal.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fhir_profiling.errors import InvalidArgumentError, require_dict

logger = logging.getLogger(__name__)


def _require_profile_url(profile_url: Any) -> str:
    if not isinstance(profile_url, str) or not profile_url:
        raise InvalidArgumentError("Profile url must be a non-empty string")
    return profile_url


def _writable_profiles(meta: dict[str, Any]) -> Optional[list[str]]:
    current = meta.get("profile")
    if current is not None and not isinstance(current, list):
        raise InvalidArgumentError(
            f"meta.profile must be a list, got: {type(current).__name__}"
        )
    return current


def get_profiles(resource: dict[str, Any]) -> list[str]:
    """Return a copy of the profiles asserted on *resource*.

    A ``meta`` or ``meta.profile`` of the wrong shape reads as no profiles.
    """
    require_dict(resource, "FHIR resource")
    meta = resource.get("meta")
    if not isinstance(meta, dict):
        return []
    current = meta.get("profile")
    if not isinstance(current, list):
        return []
    return list(current)


def has_profile(resource: dict[str, Any], profile_url: str) -> bool:
    return _require_profile_url(profile_url) in get_profiles(resource)


def assert_profile(resource: dict[str, Any], profile_url: str) -> None:
    """Assert that *resource* conforms to *profile_url*.

    Creates ``meta`` and ``meta.profile`` as needed.  A url that is
    already present is left alone.

    Raises:
        InvalidArgumentError: If ``meta`` is not a dict or ``meta.profile``
            is not a list.
    """
    require_dict(resource, "FHIR resource")
    _require_profile_url(profile_url)

    meta = resource.get("meta")
    if meta is None:
        meta = resource["meta"] = {}
    require_dict(meta, "meta")

    current = _writable_profiles(meta)
    if not current:
        meta["profile"] = [profile_url]
    elif profile_url in current:
        return
    else:
        current.append(profile_url)
    logger.debug(
        "Asserted profile %s on %s", profile_url, resource.get("resourceType", "resource")
    )


def retract_profile(
    resource: dict[str, Any],
    profile_url: str,
    *,
    reference_time: Optional[str] = None,
) -> None:
    """Remove the assertion that *resource* conforms to *profile_url*.

    Does nothing when the profile is not asserted.  Otherwise the url is
    removed and ``meta.lastUpdated`` is set to *reference_time*
    (ISO-8601), or to the current UTC time.

    Args:
        resource:       FHIR resource dict, modified in place.
        profile_url:    Canonical url to retract.
        reference_time: Value for ``meta.lastUpdated``.  Defaults to
                        ``datetime.now(timezone.utc)``.

    Raises:
        InvalidArgumentError: If ``meta`` is not a dict or ``meta.profile``
            is not a list.
    """
    require_dict(resource, "FHIR resource")
    _require_profile_url(profile_url)

    meta = resource.get("meta")
    if meta is None:
        return
    require_dict(meta, "meta")
    current = _writable_profiles(meta)
    if not current or profile_url not in current:
        return

    if reference_time is None:
        reference_time = datetime.now(timezone.utc).isoformat()
    meta["lastUpdated"] = reference_time
    current.remove(profile_url)
    if not current:
        del meta["profile"]
    logger.debug(
        "Retracted profile %s from %s", profile_url, resource.get("resourceType", "resource")
    )
