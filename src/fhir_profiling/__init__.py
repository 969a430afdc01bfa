"""
fhir-profiling: build and check profiled FHIR R4 resources.

Resources are JSON-parsed dicts.  The core modules provide:

  - ``extensions``: URL-keyed extension tree (get / set / add / remove)
  - ``profiles``: idempotent ``meta.profile`` assertions
  - ``codecs``: enum ↔ coded extension value mapping
  - ``components``: replace-by-kind ``Observation.component`` handling
  - ``validation``: declarative rule engine producing ValidationResult

Profile-specific helpers live in ``fhir_profiling.us_core``.
"""

__version__ = "0.1.0"

from fhir_profiling.errors import (
    ProfilingError,
    InvalidArgumentError,
    DomainMappingError,
)
from fhir_profiling.config import DEFAULT_SETTINGS, resolve_settings
from fhir_profiling.datatypes import (
    Coding,
    Code,
    String,
    ExtensionValue,
    codeable_concept,
    concept_has_coding,
    quantity,
    reference,
)
from fhir_profiling.extensions import (
    Extension,
    get_extension,
    get_extensions,
    get_extension_value,
    has_extension,
    set_extension,
    add_extension,
    remove_extension,
    find_extension_element,
)
from fhir_profiling.profiles import (
    assert_profile,
    retract_profile,
    has_profile,
    get_profiles,
)
from fhir_profiling.codecs import EnumCodec
from fhir_profiling.components import (
    get_component,
    get_component_value,
    set_component,
    clear_component,
)
from fhir_profiling.validation import (
    CascadeMode,
    Check,
    FieldRule,
    Validator,
    ValidationFailure,
    ValidationResult,
    rule_for,
    element,
    not_none,
    not_empty,
    must,
    concept_contains,
    concept_list_contains,
    component_contains,
    coding_check,
    profile_asserted,
)

__all__ = [
    "__version__",
    # Errors
    "ProfilingError",
    "InvalidArgumentError",
    "DomainMappingError",
    # Settings
    "DEFAULT_SETTINGS",
    "resolve_settings",
    # Data types
    "Coding",
    "Code",
    "String",
    "ExtensionValue",
    "codeable_concept",
    "concept_has_coding",
    "quantity",
    "reference",
    # Extension tree
    "Extension",
    "get_extension",
    "get_extensions",
    "get_extension_value",
    "has_extension",
    "set_extension",
    "add_extension",
    "remove_extension",
    "find_extension_element",
    # Profiles
    "assert_profile",
    "retract_profile",
    "has_profile",
    "get_profiles",
    # Codecs
    "EnumCodec",
    # Components
    "get_component",
    "get_component_value",
    "set_component",
    "clear_component",
    # Validation
    "CascadeMode",
    "Check",
    "FieldRule",
    "Validator",
    "ValidationFailure",
    "ValidationResult",
    "rule_for",
    "element",
    "not_none",
    "not_empty",
    "must",
    "concept_contains",
    "concept_list_contains",
    "component_contains",
    "coding_check",
    "profile_asserted",
]
