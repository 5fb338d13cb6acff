"""
Exceptions for the connex-validator package.
"""
from enum import Enum
from typing import Optional, Sequence, Tuple


class ViolationCode(str, Enum):
    """
    Machine-readable codes for schema violations.

    Every ValidationError subclass carries one of these so callers can
    branch on the kind of failure without matching on messages.
    """
    SHAPE = "SHAPE"
    MISSING_FIELD = "MISSING_FIELD"
    UNEXPECTED_FIELD = "UNEXPECTED_FIELD"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    FORMAT = "FORMAT"
    MODE_MISMATCH = "MODE_MISMATCH"
    AGGREGATE = "AGGREGATE"


def _describe_path(path: str) -> str:
    return path or "<record>"


class ValidationError(ValueError):
    """Base exception for records that do not satisfy their schema."""

    code = ViolationCode.FORMAT

    def __init__(self, message: str, path: str = "", expected: Optional[str] = None):
        self.path = path
        self.expected = expected
        self.reason = message
        super().__init__(f"{_describe_path(path)}: {message}")


class ShapeError(ValidationError):
    """Raised when a record is not a mapping (or is None)."""
    code = ViolationCode.SHAPE


class MissingFieldError(ValidationError):
    """Raised when one or more required fields are absent."""

    code = ViolationCode.MISSING_FIELD

    def __init__(self, missing: Sequence[str], path: str = ""):
        self.missing: Tuple[str, ...] = tuple(missing)
        super().__init__(f"missing required fields: {', '.join(self.missing)}", path)


class UnexpectedFieldError(ValidationError):
    """Raised when a record carries fields its schema does not declare."""

    code = ViolationCode.UNEXPECTED_FIELD

    def __init__(self, unexpected: Sequence[str], path: str = ""):
        self.unexpected: Tuple[str, ...] = tuple(unexpected)
        super().__init__(f"unexpected fields: {', '.join(self.unexpected)}", path)


class TypeMismatchError(ValidationError):
    """Raised when a field holds the wrong primitive kind."""
    code = ViolationCode.TYPE_MISMATCH


class FormatError(ValidationError):
    """Raised when a field has the right kind but fails a format predicate."""
    code = ViolationCode.FORMAT


class ModeMismatchError(ValidationError):
    """
    Raised when a conditional field is present or absent against the mode.

    Covers `meta`/`decoded` on logs checked with the wrong `expanded` flag
    and `decoded` shapes that disagree with a VM output's `reverted` flag.
    """

    code = ViolationCode.MODE_MISMATCH

    def __init__(self, message: str, path: str = "", mode: Optional[str] = None):
        self.mode = mode
        super().__init__(message, path)


class AggregateValidationError(ValidationError):
    """Raised in aggregate mode, carrying every violation found."""

    code = ViolationCode.AGGREGATE

    def __init__(self, errors: Sequence[ValidationError]):
        self.errors: Tuple[ValidationError, ...] = tuple(errors)
        first = self.errors[0]
        message = f"{len(self.errors)} violation(s): " + "; ".join(str(e) for e in self.errors)
        super().__init__(message, first.path, first.expected)

    @property
    def first(self) -> ValidationError:
        """The violation first-violation mode would have raised."""
        return self.errors[0]

    def __str__(self) -> str:
        return self.reason
