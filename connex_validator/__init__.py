"""
connex-validator: conformance checks for records returned by the Thor client API.

Primitive predicates (is_address, is_bytes32, ...) answer true/false for a
single value; ensure_* validators check whole records and raise a
ValidationError subclass naming the offending field path.
"""
from .version import __version__
from .exceptions import (
    ValidationError,
    ShapeError,
    MissingFieldError,
    UnexpectedFieldError,
    TypeMismatchError,
    FormatError,
    ModeMismatchError,
    AggregateValidationError,
    ViolationCode,
)
from .types import (
    is_hex_bytes,
    is_address,
    is_bytes32,
    is_checksum_address,
    is_semver,
    is_uint,
    is_decimal_uint,
    is_decimal_int,
    is_fraction,
)
from .validators import (
    ensure_block,
    ensure_genesis_block,
    ensure_status,
    ensure_account,
    ensure_account_code,
    ensure_storage,
    ensure_clause,
    ensure_transaction,
    ensure_transaction_receipt,
    ensure_vm_output,
    ensure_event_criteria,
    ensure_transfer_criteria,
    ensure_filter_range,
    ensure_event_log,
    ensure_transfer_log,
)
from .vendor import ensure_tx_response, ensure_cert_response
from .reporting import Verdict, check, assert_valid
from .config import ValidatorConfig, NetworkConfig

__all__ = [
    "__version__",
    # errors
    "ValidationError",
    "ShapeError",
    "MissingFieldError",
    "UnexpectedFieldError",
    "TypeMismatchError",
    "FormatError",
    "ModeMismatchError",
    "AggregateValidationError",
    "ViolationCode",
    # predicates
    "is_hex_bytes",
    "is_address",
    "is_bytes32",
    "is_checksum_address",
    "is_semver",
    "is_uint",
    "is_decimal_uint",
    "is_decimal_int",
    "is_fraction",
    # validators
    "ensure_block",
    "ensure_genesis_block",
    "ensure_status",
    "ensure_account",
    "ensure_account_code",
    "ensure_storage",
    "ensure_clause",
    "ensure_transaction",
    "ensure_transaction_receipt",
    "ensure_vm_output",
    "ensure_event_criteria",
    "ensure_transfer_criteria",
    "ensure_filter_range",
    "ensure_event_log",
    "ensure_transfer_log",
    "ensure_tx_response",
    "ensure_cert_response",
    # reporting
    "Verdict",
    "check",
    "assert_valid",
    # config
    "ValidatorConfig",
    "NetworkConfig",
]
