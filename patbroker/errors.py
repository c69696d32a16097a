"""Error types for patbroker."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Literal, Optional

from pydantic import BaseModel

ViolationKind = Literal["field", "policy"]


class Violation(BaseModel, frozen=True):
    """A single reason a token request was rejected."""

    field: str
    message: str
    kind: ViolationKind = "field"

    def __str__(self) -> str:
        return self.message


class BrokerError(Exception):
    """Base class for all patbroker errors."""


class ConfigurationError(BrokerError):
    """Backend configuration is missing or unusable."""


class FieldDecodeError(BrokerError):
    """A request field could not be decoded to its schema type."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"field '{field}' is invalid: {reason}")
        self.field = field
        self.reason = reason


class IssuanceError(BrokerError):
    """The token issuing service failed to mint a token."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MultiError(BrokerError):
    """Ordered collection of violations gathered from one validation pass.

    An empty instance means success. Use :meth:`error_or_none` to collapse
    the accumulator into either ``None`` or the error itself.
    """

    def __init__(self, violations: Optional[Iterable[Violation]] = None) -> None:
        super().__init__()
        self.violations: List[Violation] = list(violations or [])

    def append(
        self, field: str, message: str, kind: ViolationKind = "field"
    ) -> "MultiError":
        self.violations.append(Violation(field=field, message=message, kind=kind))
        return self

    def extend(self, other: Iterable[Violation]) -> "MultiError":
        self.violations.extend(other)
        return self

    def is_empty(self) -> bool:
        return not self.violations

    def error_or_none(self) -> Optional["MultiError"]:
        return None if self.is_empty() else self

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    def __iter__(self) -> Iterator[Violation]:
        return iter(self.violations)

    def __len__(self) -> int:
        return len(self.violations)

    def __bool__(self) -> bool:
        return bool(self.violations)

    def __str__(self) -> str:
        if not self.violations:
            return "no errors"
        if len(self.violations) == 1:
            header = "1 error occurred:"
        else:
            header = f"{len(self.violations)} errors occurred:"
        lines = [header] + [f"\t* {v.message}" for v in self.violations]
        return "\n".join(lines)


class RequestRejected(BrokerError):
    """A token request failed decoding or policy validation."""

    def __init__(self, errors: MultiError, prefix: str = "Failed to validate") -> None:
        super().__init__(f"{prefix} - {errors}")
        self.errors = errors
