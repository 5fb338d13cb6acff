"""
Turn validator outcomes into verdicts, assertions, or log lines.

Validators signal failure by raising; callers that prefer a value (a
monitoring loop, a test helper) go through `check`, and test suites can use
`assert_valid` to get a plain AssertionError with the diagnostic.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from ._rate_limited_log import rate_limited_log
from .exceptions import AggregateValidationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Verdict:
    """
    Outcome of one validation.

    Attributes:
        passed: Whether the record satisfied its schema
        errors: Violations found, in the order they were found
    """
    passed: bool
    errors: Tuple[ValidationError, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.passed

    @property
    def message(self) -> str:
        if self.passed:
            return "ok"
        return "; ".join(str(e) for e in self.errors)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(e.path for e in self.errors)


def check(
    validator: Callable[..., None],
    value: Any,
    *args: Any,
    log_failures: bool = False,
    logger_instance: Optional[logging.Logger] = None,
    **kwargs: Any,
) -> Verdict:
    """
    Run a validator and return its verdict instead of raising.

    Args:
        validator: An ensure_* function
        value: Candidate record
        *args: Mode arguments for the validator (e.g. expanded)
        log_failures: Emit a rate-limited warning for failures
        logger_instance: Logger for failure warnings
        **kwargs: Keyword arguments for the validator (abi, strict, aggregate)

    Returns:
        Verdict for the value

    Only ValidationError is converted; anything else (such as a malformed
    ABI) propagates.
    """
    try:
        validator(value, *args, **kwargs)
    except AggregateValidationError as e:
        verdict = Verdict(False, e.errors)
    except ValidationError as e:
        verdict = Verdict(False, (e,))
    else:
        return Verdict(True)

    name = getattr(validator, "__name__", repr(validator))
    if log_failures:
        rate_limited_log(f"{name} rejected record: {verdict.message}", logger_instance=logger_instance or logger)
    else:
        logger.debug("%s rejected record: %s", name, verdict.message)
    return verdict


def assert_valid(validator: Callable[..., None], value: Any, *args: Any, **kwargs: Any) -> None:
    """
    Assert that a value passes a validator.

    Raises:
        AssertionError: With the verdict message, chained to the violation
    """
    try:
        validator(value, *args, **kwargs)
    except ValidationError as e:
        raise AssertionError(str(e)) from e
