"""Ordered required-field validation.

Controllers describe their required inputs as a :class:`RequiredFields` schema and check it before
touching the database. Rules run in declaration order, so the first error always names the first
missing field.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple


@dataclass(frozen=True)
class FieldRule:
    """A single required field and the message reported when it is missing.

    ``key`` is the body key the message is reported under (``"message"`` or ``"error"``).
    """

    field: str
    message: str
    key: str = "message"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    key: str = "message"

    def as_body(self) -> dict:
        return {self.key: self.message}


@dataclass(frozen=True)
class ValidationResult:
    errors: Tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first(self) -> FieldError | None:
        return self.errors[0] if self.errors else None


def is_missing(value: Any) -> bool:
    """A value is missing when it is absent, ``None`` or an empty string/collection."""
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict)) and len(value) == 0:
        return True
    return False


@dataclass(frozen=True)
class RequiredFields:
    rules: Tuple[FieldRule, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, *rules: FieldRule) -> "RequiredFields":
        return cls(rules=tuple(rules))

    def validate(self, data: Mapping[str, Any]) -> ValidationResult:
        """Check every rule against ``data`` and collect the missing fields in rule order."""
        errors: List[FieldError] = [
            FieldError(field=rule.field, message=rule.message, key=rule.key)
            for rule in self.rules
            if is_missing(data.get(rule.field))
        ]
        return ValidationResult(errors=tuple(errors))
