"""Runtime settings shared by the profile helpers and validators."""

from __future__ import annotations

from typing import Any, Optional

from fhir_profiling.errors import InvalidArgumentError


DEFAULT_SETTINGS: dict[str, Any] = {
    # text written into a race extension created implicitly by
    # add_race_omb_category()
    "race_placeholder_text": "Generated Text",
    # validators additionally check meta.profile for their own profile URL
    "require_profile_assertion": False,
}


def resolve_settings(overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Merge *overrides* over ``DEFAULT_SETTINGS``.

    Raises:
        InvalidArgumentError: If *overrides* contains an unknown key.
    """
    overrides = overrides or {}
    unknown = set(overrides) - set(DEFAULT_SETTINGS)
    if unknown:
        raise InvalidArgumentError(
            f"Unknown setting(s): {', '.join(sorted(unknown))}. "
            f"Supported: {', '.join(sorted(DEFAULT_SETTINGS))}"
        )
    return {**DEFAULT_SETTINGS, **overrides}
