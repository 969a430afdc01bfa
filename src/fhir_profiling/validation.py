"""
Declarative conformance rules for FHIR resources.

A ``Validator`` is an ordered list of rules.  Each ``FieldRule`` reads one
field from the resource and runs its ``Check`` predicates against it; a
``Validator`` can itself be used as a rule, which embeds its whole rule
set (nesting, not inheritance).

Failures are data: every failing check becomes a ``ValidationFailure`` in
declaration order, and evaluation continues with the next rule.  Within a
single ``FieldRule``, ``CascadeMode.STOP`` ends evaluation at the first
failing check, for checks that only make sense once a precondition holds
(e.g. "not empty" before "some element has a system").

Running a validator never mutates the resource and never raises for
problems in the data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Union

from fhir_profiling.datatypes import Coding, concept_has_coding
from fhir_profiling.errors import InvalidArgumentError, require_dict

logger = logging.getLogger(__name__)

# Exceptions a predicate may raise on malformed data; reported as failures.
_DATA_ERRORS = (TypeError, AttributeError, KeyError, IndexError)


class CascadeMode(Enum):
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class ValidationFailure:
    field: str
    message: str
    rule: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    failures: tuple[ValidationFailure, ...] = ()

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.failures]

    def failures_for(self, field_name: str) -> list[ValidationFailure]:
        return [f for f in self.failures if f.field == field_name]


@dataclass(frozen=True)
class Check:
    """A predicate over a field value plus the message used when it fails.

    ``message`` may contain ``{field}``, replaced by the field name.
    """

    predicate: Callable[[Any], bool]
    message: str
    rule: str = "must"

    def passes(self, value: Any) -> bool:
        try:
            return bool(self.predicate(value))
        except _DATA_ERRORS:
            return False

    def failure(self, field_name: str) -> ValidationFailure:
        return ValidationFailure(
            field_name, self.message.replace("{field}", field_name), self.rule,
        )


@dataclass(frozen=True)
class FieldRule:
    """Checks run against one field of the resource."""

    field: str
    selector: Callable[[dict[str, Any]], Any]
    checks: tuple[Check, ...]
    cascade: CascadeMode = CascadeMode.CONTINUE

    def evaluate(self, resource: dict[str, Any]) -> list[ValidationFailure]:
        try:
            value = self.selector(resource)
        except _DATA_ERRORS:
            value = None

        failures: list[ValidationFailure] = []
        for check in self.checks:
            if check.passes(value):
                continue
            failures.append(check.failure(self.field))
            if self.cascade is CascadeMode.STOP:
                break
        return failures


def rule_for(
    field_name: str,
    selector: Callable[[dict[str, Any]], Any],
    *checks: Check,
    cascade: CascadeMode = CascadeMode.CONTINUE,
) -> FieldRule:
    """Shorthand for ``FieldRule(field_name, selector, checks, cascade)``."""
    if not checks:
        raise InvalidArgumentError(f"Rule for {field_name} needs at least one check")
    return FieldRule(field_name, selector, tuple(checks), cascade)


def element(name: str) -> Callable[[dict[str, Any]], Any]:
    """Selector reading a top-level element of a resource."""
    return lambda resource: resource.get(name)


class Validator:
    """An ordered, reusable set of rules."""

    def __init__(self, name: str, rules: Iterable[Union[FieldRule, "Validator"]]):
        if not name:
            raise InvalidArgumentError("Validator name must not be empty")
        self.name = name
        self.rules: tuple[Union[FieldRule, Validator], ...] = tuple(rules)

    def __repr__(self) -> str:
        return f"Validator({self.name!r}, {len(self.rules)} rules)"

    def evaluate(self, resource: dict[str, Any]) -> list[ValidationFailure]:
        failures: list[ValidationFailure] = []
        for rule in self.rules:
            failures.extend(rule.evaluate(resource))
        return failures

    def validate(self, resource: dict[str, Any]) -> ValidationResult:
        """Run every rule against *resource*.

        Raises:
            InvalidArgumentError: If *resource* is None or not a dict.
        """
        require_dict(resource, "Resource to validate")
        failures = tuple(self.evaluate(resource))
        logger.debug(
            "%s: %d failure(s) on %s",
            self.name, len(failures), resource.get("resourceType", "resource"),
        )
        return ValidationResult(valid=not failures, failures=failures)


# ── Reusable checks ───────────────────────────────────────────────


def not_none(message: str = "{field} must not be null.") -> Check:
    return Check(lambda value: value is not None, message, "not_none")


def not_empty(message: str = "{field} must not be empty.") -> Check:
    def _check(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, (str, list, tuple, dict)):
            return len(value) > 0
        return True

    return Check(_check, message, "not_empty")


def must(predicate: Callable[[Any], bool], message: str) -> Check:
    return Check(predicate, message, "must")


def _concept_message(system: str, code: str) -> str:
    return f"{{field}} must contain a CodeableConcept with a code matching: {system}#{code}."


def concept_contains(system: str, code: str) -> Check:
    """Field is a CodeableConcept with a coding of exactly *system*#*code*."""
    return Check(
        lambda concept: concept_has_coding(concept, system, code),
        _concept_message(system, code),
        "concept_contains",
    )


def concept_list_contains(system: str, code: str) -> Check:
    """Field is a list in which some CodeableConcept has *system*#*code*."""
    def _check(concepts: Any) -> bool:
        if not isinstance(concepts, list):
            return False
        return any(concept_has_coding(c, system, code) for c in concepts)

    return Check(_check, _concept_message(system, code), "concept_list_contains")


def component_contains(system: str, code: str, message: str) -> Check:
    """Field is a list of components, one of which has a code *system*#*code*."""
    def _check(components: Any) -> bool:
        if not isinstance(components, list):
            return False
        return any(
            isinstance(c, dict) and concept_has_coding(c.get("code"), system, code)
            for c in components
        )

    return Check(_check, message, "component_contains")


def coding_check(coding: Coding) -> Check:
    """``concept_contains`` for a ready-made Coding."""
    return concept_contains(coding.system, coding.code)


def profile_asserted(profile_url: str) -> Check:
    """Field is ``meta.profile`` and lists *profile_url*."""
    def _check(profile_list: Any) -> bool:
        return isinstance(profile_list, (list, tuple)) and profile_url in profile_list

    return Check(
        _check, f"{{field}} must assert the profile {profile_url}.", "profile_asserted",
    )
