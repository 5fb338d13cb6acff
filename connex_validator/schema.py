"""
Declarative schema tables and the routine that checks records against them.

A record schema is an ordered table of fields, each with a rule. Conditional
shapes (expanded vs compact logs, reverted vs successful VM outputs) are
separate tables, so the mode coupling lives in data rather than in the
validators.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import ValidatorConfig
from .exceptions import (
    AggregateValidationError,
    FormatError,
    MissingFieldError,
    ModeMismatchError,
    ShapeError,
    TypeMismatchError,
    UnexpectedFieldError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def join_path(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


class CheckContext:
    """
    Per-call state of one validation run.

    In first-violation mode `report` raises immediately; in aggregate mode
    it collects the error and lets the walk continue.
    """

    def __init__(self, strict: bool = True, aggregate: bool = False):
        self.strict = strict
        self.aggregate = aggregate
        self.errors: List[ValidationError] = []

    def report(self, error: ValidationError) -> None:
        if not self.aggregate:
            raise error
        self.errors.append(error)


class Rule:
    """A check applied to a single field value."""

    expected = "value"

    def check(self, value: Any, path: str, ctx: CheckContext) -> None:
        raise NotImplementedError


def _is_kind(value: Any, types: Tuple[type, ...]) -> bool:
    if isinstance(value, bool) and bool not in types:
        return False
    return isinstance(value, types)


class Kind(Rule):
    """Type-only rule, e.g. booleans and free-form strings."""

    def __init__(self, types: Tuple[type, ...], expected: str):
        self.types = types
        self.expected = expected

    def check(self, value: Any, path: str, ctx: CheckContext) -> bool:
        if _is_kind(value, self.types):
            return True
        ctx.report(TypeMismatchError(
            f"expected {self.expected}, got {type_name(value)}", path, self.expected
        ))
        return False


class Format(Kind):
    """Type check followed by a format predicate."""

    def __init__(self, predicate: Callable[[Any], bool], expected: str, types: Tuple[type, ...] = (str,)):
        super().__init__(types, expected)
        self.predicate = predicate

    def check(self, value: Any, path: str, ctx: CheckContext) -> bool:
        if not super().check(value, path, ctx):
            return False
        if self.predicate(value):
            return True
        ctx.report(FormatError(f"expected {self.expected}, got {value!r}", path, self.expected))
        return False


class Nullable(Rule):
    def __init__(self, rule: Rule):
        self.rule = rule
        self.expected = f"{rule.expected} or null"

    def check(self, value: Any, path: str, ctx: CheckContext) -> None:
        if value is not None:
            self.rule.check(value, path, ctx)


class ListOf(Rule):
    """Sequence rule; elements are checked in order with indexed paths."""

    def __init__(self, item: Rule, max_items: Optional[int] = None, length: Optional[int] = None):
        self.item = item
        self.max_items = max_items
        self.length = length
        self.expected = f"list of {item.expected}"

    def check(self, value: Any, path: str, ctx: CheckContext) -> None:
        if not isinstance(value, (list, tuple)):
            ctx.report(TypeMismatchError(
                f"expected {self.expected}, got {type_name(value)}", path, self.expected
            ))
            return
        if self.max_items is not None and len(value) > self.max_items:
            ctx.report(FormatError(
                f"expected at most {self.max_items} items, got {len(value)}", path, self.expected
            ))
        if self.length is not None and len(value) != self.length:
            ctx.report(FormatError(
                f"expected exactly {self.length} items, got {len(value)}", path, self.expected
            ))
        for index, item in enumerate(value):
            self.item.check(item, index_path(path, index), ctx)


class Record(Rule):
    """Recurse into a nested record with its own schema."""

    def __init__(self, schema: "Schema"):
        self.schema = schema
        self.expected = schema.name

    def check(self, value: Any, path: str, ctx: CheckContext) -> None:
        self.schema.check(value, path, ctx)


class AnyMapping(Kind):
    """Any mapping, contents not inspected."""

    def __init__(self, expected: str = "object"):
        super().__init__((Mapping,), expected)


@dataclass(frozen=True)
class Field:
    """
    One row of a schema table.

    Attributes:
        name: Key in the record
        rule: Rule applied to the value when the key is present
        optional: Absence is valid
        mode: Mode the field belongs to; its absence is a mode mismatch
    """
    name: str
    rule: Rule
    optional: bool = False
    mode: Optional[str] = None


class Schema:
    """
    Ordered field table for one record type (or one mode of it).

    Args:
        name: Record type name used in diagnostics
        fields: Field rows in declaration order
        forbidden: Keys that must be absent, mapped to the mode allowing them
        refine: Hook run after the table for value-dependent branches
    """

    def __init__(
        self,
        name: str,
        fields: Sequence[Field],
        forbidden: Optional[Dict[str, str]] = None,
        refine: Optional[Callable[[Mapping, str, CheckContext], None]] = None,
    ):
        self.name = name
        self.fields: Tuple[Field, ...] = tuple(fields)
        self.forbidden: Dict[str, str] = dict(forbidden or {})
        self.refine = refine
        self._names = {f.name for f in self.fields}

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def variant(
        self,
        name: str,
        fields: Iterable[Field] = (),
        drop: Iterable[str] = (),
        forbidden: Optional[Dict[str, str]] = None,
        refine: Optional[Callable[[Mapping, str, CheckContext], None]] = None,
    ) -> "Schema":
        """
        Derive a schema for another mode of the same record.

        Fields with a matching name are replaced in place, new ones are
        appended and names in `drop` are removed.
        """
        replacements = {f.name: f for f in fields}
        dropped = set(drop)
        rows = [replacements.pop(f.name, f) for f in self.fields if f.name not in dropped]
        rows.extend(replacements.values())
        return Schema(
            name,
            rows,
            forbidden=self.forbidden if forbidden is None else forbidden,
            refine=self.refine if refine is None else refine,
        )

    def check(self, value: Any, path: str, ctx: CheckContext) -> None:
        if not isinstance(value, Mapping):
            ctx.report(ShapeError(f"expected {self.name} object, got {type_name(value)}", path, self.name))
            return

        missing = [f.name for f in self.fields if not f.optional and f.mode is None and f.name not in value]
        if missing:
            ctx.report(MissingFieldError(missing, path))

        for field in self.fields:
            if field.mode is not None and not field.optional and field.name not in value:
                ctx.report(ModeMismatchError(
                    f"'{field.name}' is required in {field.mode} mode",
                    join_path(path, field.name),
                    field.mode,
                ))

        for key, mode in self.forbidden.items():
            if key in value:
                ctx.report(ModeMismatchError(
                    f"'{key}' is only allowed in {mode} mode", join_path(path, key), mode
                ))

        if ctx.strict:
            unexpected = [str(k) for k in value if k not in self._names and k not in self.forbidden]
            if unexpected:
                ctx.report(UnexpectedFieldError(unexpected, path))

        for field in self.fields:
            if field.name in value:
                field.rule.check(value[field.name], join_path(path, field.name), ctx)

        if self.refine is not None:
            self.refine(value, path, ctx)


def validate(
    value: Any,
    schema: Schema,
    strict: Optional[bool] = None,
    aggregate: Optional[bool] = None,
) -> None:
    """
    Check a record against a schema table.

    Args:
        value: Candidate record
        schema: Table for the expected record type
        strict: Reject undeclared keys (defaults to ValidatorConfig)
        aggregate: Collect every violation instead of stopping at the first

    Raises:
        ValidationError: The first violation, in field-declaration order
        AggregateValidationError: Every violation, when aggregating
    """
    if strict is None:
        strict = ValidatorConfig.strict()
    if aggregate is None:
        aggregate = ValidatorConfig.aggregate()

    ctx = CheckContext(strict=strict, aggregate=aggregate)
    try:
        schema.check(value, "", ctx)
    except ValidationError as e:
        logger.debug("%s failed validation: %s", schema.name, e)
        raise

    if ctx.errors:
        logger.debug("%s failed validation with %d violation(s)", schema.name, len(ctx.errors))
        raise AggregateValidationError(ctx.errors)
