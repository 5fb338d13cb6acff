"""
Structural validators for Thor client API records.

Each record type is an ordered schema table; conditional shapes have their
own tables (compact vs expanded logs, embedded vs standalone transactions)
and value-dependent branches are refine hooks. The `ensure_*` functions
pick the table for the requested mode and return normally on success.

Every validator accepts keyword-only `strict` and `aggregate` overrides:
    strict: reject keys the table does not declare (ValidatorConfig default)
    aggregate: raise AggregateValidationError with every violation instead
        of the first one
"""
import logging
from collections.abc import Mapping
from functools import partial
from typing import Any, Dict, Optional

from .abi import event_inputs_schema, event_topic, function_outputs_schema
from .config import NetworkConfig
from .exceptions import FormatError, MissingFieldError, ModeMismatchError
from .schema import (
    AnyMapping,
    CheckContext,
    Field,
    Format,
    Kind,
    ListOf,
    Nullable,
    Record,
    Schema,
    index_path,
    join_path,
    validate,
)
from .types import (
    is_address,
    is_bytes32,
    is_checksum_address,
    is_decimal_uint,
    is_fraction,
    is_hex_bytes,
    is_uint,
)

logger = logging.getLogger(__name__)

EXPANDED = "expanded"
REVERTED = "reverted"
REVERT_REASON = "revertReason"
MAX_TOPICS = 5

# Field rules
ADDRESS = Format(is_address, "address")
BYTES32 = Format(is_bytes32, "bytes32")
HEX_BYTES = Format(is_hex_bytes, "hex bytes")
BLOCK_REF = Format(lambda v: is_hex_bytes(v, 8), "8-byte hex")
UINT = Format(is_uint, "non-negative integer", (int,))
UINT8 = Format(lambda v: is_uint(v, 8), "integer in 0..255", (int,))
DECIMAL = Format(is_decimal_uint, "non-negative decimal string")
FRACTION = Format(is_fraction, "number in [0, 1]", (int, float))
BOOL = Kind((bool,), "bool")
STRING = Kind((str,), "string")
ANY_ADDRESS = Format(lambda v: is_address(v) or is_checksum_address(v), "address")


TX_META_SCHEMA = Schema("TxMeta", [
    Field("blockID", BYTES32),
    Field("blockNumber", UINT),
    Field("blockTimestamp", UINT),
])

LOG_META_SCHEMA = TX_META_SCHEMA.variant("LogMeta", [
    Field("txID", BYTES32),
    Field("txOrigin", ADDRESS),
])

CLAUSE_SCHEMA = Schema("Clause", [
    Field("to", Nullable(ADDRESS)),
    Field("value", DECIMAL),
    Field("data", HEX_BYTES),
])

# Transactions listed inside an expanded block; linkage comes from the block.
EMBEDDED_TRANSACTION_SCHEMA = Schema("Transaction", [
    Field("id", BYTES32),
    Field("chainTag", UINT8),
    Field("blockRef", BLOCK_REF),
    Field("expiration", UINT),
    Field("clauses", ListOf(Record(CLAUSE_SCHEMA))),
    Field("gasPriceCoef", UINT8),
    Field("gas", UINT),
    Field("origin", ADDRESS),
    Field("nonce", HEX_BYTES),
    Field("dependsOn", Nullable(BYTES32)),
    Field("size", UINT),
])

# meta is null while the transaction is pending
TRANSACTION_SCHEMA = EMBEDDED_TRANSACTION_SCHEMA.variant("Transaction", [
    Field("meta", Nullable(Record(TX_META_SCHEMA))),
])

BLOCK_SCHEMA = Schema("Block", [
    Field("id", BYTES32),
    Field("number", UINT),
    Field("size", UINT),
    Field("parentID", BYTES32),
    Field("timestamp", UINT),
    Field("gasLimit", UINT),
    Field("beneficiary", ADDRESS),
    Field("gasUsed", UINT),
    Field("totalScore", UINT),
    Field("txsRoot", BYTES32),
    Field("stateRoot", BYTES32),
    Field("receiptsRoot", BYTES32),
    Field("signer", ADDRESS),
    Field("transactions", ListOf(BYTES32)),
    Field("isTrunk", BOOL),
])

EXPANDED_BLOCK_SCHEMA = BLOCK_SCHEMA.variant("ExpandedBlock", [
    Field("transactions", ListOf(Record(EMBEDDED_TRANSACTION_SCHEMA))),
])

HEAD_SCHEMA = Schema("Head", [
    Field("id", BYTES32),
    Field("number", UINT),
    Field("timestamp", UINT),
    Field("parentID", BYTES32),
])

STATUS_SCHEMA = Schema("Status", [
    Field("progress", FRACTION),
    Field("head", Record(HEAD_SCHEMA)),
])

ACCOUNT_SCHEMA = Schema("Account", [
    Field("balance", DECIMAL),
    Field("energy", DECIMAL),
    Field("hasCode", BOOL),
])

CODE_SCHEMA = Schema("Code", [
    Field("code", HEX_BYTES),
])

STORAGE_SCHEMA = Schema("Storage", [
    Field("value", BYTES32),
])

EVENT_LOG_SCHEMA = Schema(
    "EventLog",
    [
        Field("address", ADDRESS),
        Field("topics", ListOf(BYTES32, max_items=MAX_TOPICS)),
        Field("data", HEX_BYTES),
    ],
    forbidden={"meta": EXPANDED, "decoded": EXPANDED},
)

EXPANDED_EVENT_LOG_SCHEMA = EVENT_LOG_SCHEMA.variant(
    "ExpandedEventLog",
    [
        Field("meta", Record(LOG_META_SCHEMA), mode=EXPANDED),
        Field("decoded", AnyMapping(), optional=True),
    ],
    forbidden={},
)

TRANSFER_LOG_SCHEMA = Schema(
    "TransferLog",
    [
        Field("sender", ADDRESS),
        Field("recipient", ADDRESS),
        Field("amount", DECIMAL),
    ],
    forbidden={"meta": EXPANDED},
)

EXPANDED_TRANSFER_LOG_SCHEMA = TRANSFER_LOG_SCHEMA.variant(
    "ExpandedTransferLog",
    [Field("meta", Record(LOG_META_SCHEMA), mode=EXPANDED)],
    forbidden={},
)

OUTPUT_SCHEMA = Schema("Output", [
    Field("contractAddress", Nullable(ADDRESS)),
    Field("events", ListOf(Record(EVENT_LOG_SCHEMA))),
    Field("transfers", ListOf(Record(TRANSFER_LOG_SCHEMA))),
])

RECEIPT_SCHEMA = Schema("TransactionReceipt", [
    Field("gasUsed", UINT),
    Field("gasPayer", ADDRESS),
    Field("paid", DECIMAL),
    Field("reward", DECIMAL),
    Field("reverted", BOOL),
    Field("outputs", ListOf(Record(OUTPUT_SCHEMA))),
    Field("meta", Record(LOG_META_SCHEMA)),
])


def _refine_vm_output(value: Mapping, path: str, ctx: CheckContext, outputs: Optional[Schema] = None) -> None:
    """Branch on `reverted`: the shape of `decoded` depends on it."""
    reverted = value.get("reverted")
    if not isinstance(reverted, bool):
        return

    decoded_path = join_path(path, "decoded")
    if "decoded" not in value:
        if outputs is not None and not reverted:
            ctx.report(MissingFieldError(["decoded"], path))
        return

    decoded = value["decoded"]
    if not isinstance(decoded, Mapping):
        return

    if reverted:
        others = [str(k) for k in decoded if k != REVERT_REASON]
        if others:
            ctx.report(ModeMismatchError(
                f"reverted output may only decode '{REVERT_REASON}', got {', '.join(others)}",
                decoded_path,
                REVERTED,
            ))
        elif REVERT_REASON not in decoded:
            ctx.report(MissingFieldError([REVERT_REASON], decoded_path))
        else:
            STRING.check(decoded[REVERT_REASON], join_path(decoded_path, REVERT_REASON), ctx)
        return

    if REVERT_REASON in decoded:
        ctx.report(ModeMismatchError(
            f"'{REVERT_REASON}' is only allowed when the output reverted",
            join_path(decoded_path, REVERT_REASON),
            REVERTED,
        ))
        return
    if outputs is not None:
        outputs.check(decoded, decoded_path, ctx)


VM_OUTPUT_SCHEMA = Schema(
    "VMOutput",
    [
        Field("data", HEX_BYTES),
        Field("vmError", STRING),
        Field("gasUsed", UINT),
        Field("reverted", BOOL),
        Field("events", ListOf(Record(EVENT_LOG_SCHEMA))),
        Field("transfers", ListOf(Record(TRANSFER_LOG_SCHEMA))),
        Field("decoded", AnyMapping(), optional=True),
    ],
    refine=_refine_vm_output,
)

EVENT_CRITERIA_SCHEMA = Schema("EventCriteria", [
    Field("address", Nullable(ADDRESS), optional=True),
    *(Field(f"topic{i}", Nullable(BYTES32), optional=True) for i in range(MAX_TOPICS)),
])

TRANSFER_CRITERIA_SCHEMA = Schema("TransferCriteria", [
    Field("txOrigin", Nullable(ANY_ADDRESS), optional=True),
    Field("sender", Nullable(ANY_ADDRESS), optional=True),
    Field("recipient", Nullable(ANY_ADDRESS), optional=True),
])


def _refine_filter_range(value: Mapping, path: str, ctx: CheckContext) -> None:
    start, end = value.get("from"), value.get("to")
    if is_uint(start) and is_uint(end) and start > end:
        ctx.report(FormatError(
            f"range end {end} is before range start {start}", join_path(path, "to"), ">= from"
        ))


FILTER_RANGE_SCHEMA = Schema(
    "FilterRange",
    [
        Field("unit", Format(lambda v: v in ("block", "time"), "'block' or 'time'")),
        Field("from", UINT),
        Field("to", UINT),
    ],
    refine=_refine_filter_range,
)


def _refine_event_topic(value: Mapping, path: str, ctx: CheckContext, topic: str = "") -> None:
    topics = value.get("topics")
    if not isinstance(topics, (list, tuple)):
        return
    topics_path = join_path(path, "topics")
    if not topics:
        ctx.report(FormatError("expected the event signature as topics[0], got no topics", topics_path, topic))
    elif topics[0] != topic:
        ctx.report(FormatError(
            f"expected event signature {topic}, got {topics[0]!r}", index_path(topics_path, 0), topic
        ))


def _refine_genesis(value: Mapping, path: str, ctx: CheckContext, genesis_id: str = "") -> None:
    if value.get("number") != 0:
        ctx.report(FormatError(
            f"expected genesis block number 0, got {value.get('number')!r}", join_path(path, "number"), "0"
        ))
    if value.get("id") != genesis_id:
        ctx.report(FormatError(
            f"expected genesis id {genesis_id}, got {value.get('id')!r}", join_path(path, "id"), genesis_id
        ))


def ensure_block(value: Any, expanded: bool = False, *, strict: Optional[bool] = None,
                 aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is a block.

    Args:
        value: Candidate block
        expanded: Transactions are full records rather than ids

    Raises:
        ValidationError: If the block does not satisfy its schema
    """
    schema = EXPANDED_BLOCK_SCHEMA if expanded else BLOCK_SCHEMA
    validate(value, schema, strict=strict, aggregate=aggregate)


def ensure_genesis_block(value: Any, network: str = "testnet", *, strict: Optional[bool] = None,
                         aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is the genesis block of a known network.

    Raises:
        ValueError: If the network is unknown
        ValidationError: If the block is malformed or not that genesis
    """
    genesis_id = NetworkConfig.get_genesis_id(network)
    schema = BLOCK_SCHEMA.variant("GenesisBlock", refine=partial(_refine_genesis, genesis_id=genesis_id))
    validate(value, schema, strict=strict, aggregate=aggregate)


def ensure_status(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    validate(value, STATUS_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_account(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    validate(value, ACCOUNT_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_account_code(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    validate(value, CODE_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_storage(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    validate(value, STORAGE_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_clause(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is a transaction clause, as built for signing or taken
    from a transaction. `to` is null for contract creation.
    """
    validate(value, CLAUSE_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_transaction(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is a transaction.

    `meta` must be present; it is null for a transaction not yet in a block.
    """
    validate(value, TRANSACTION_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_transaction_receipt(value: Any, *, strict: Optional[bool] = None,
                               aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is a transaction receipt.

    Receipts always carry `meta`; the events and transfers of each output
    are compact logs without their own `meta`.
    """
    validate(value, RECEIPT_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_vm_output(value: Any, abi: Optional[Dict[str, Any]] = None, *, strict: Optional[bool] = None,
                     aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is the output of a contract call or explain.

    Args:
        value: Candidate VM output
        abi: Function ABI used to decode the output, if any

    With `reverted` true, `decoded` may only carry `revertReason`. Without
    a revert and with an ABI, `decoded` is required and must hold every
    output by position and by name.

    Raises:
        ValueError: If the ABI is not a function ABI
        ValidationError: If the output does not satisfy its schema
    """
    schema = VM_OUTPUT_SCHEMA
    if abi is not None:
        outputs = function_outputs_schema(abi)
        schema = VM_OUTPUT_SCHEMA.variant("VMOutput", refine=partial(_refine_vm_output, outputs=outputs))
    validate(value, schema, strict=strict, aggregate=aggregate)


def ensure_event_criteria(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    validate(value, EVENT_CRITERIA_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_transfer_criteria(value: Any, *, strict: Optional[bool] = None,
                             aggregate: Optional[bool] = None) -> None:
    validate(value, TRANSFER_CRITERIA_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_filter_range(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    validate(value, FILTER_RANGE_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_event_log(value: Any, expanded: bool, abi: Optional[Dict[str, Any]] = None, *,
                     strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is an event log in the given mode.

    Args:
        value: Candidate log
        expanded: Logs from a filter carry `meta`; logs inside receipts and
            VM outputs do not and must not
        abi: Event ABI the log was decoded with; makes `decoded` required
            and, for non-anonymous events, pins topics[0] to the signature

    Raises:
        ValueError: If the ABI is not an event ABI
        ValidationError: If the log does not satisfy its schema
    """
    if abi is not None:
        inputs = event_inputs_schema(abi)

    if not expanded:
        validate(value, EVENT_LOG_SCHEMA, strict=strict, aggregate=aggregate)
        return

    schema = EXPANDED_EVENT_LOG_SCHEMA
    if abi is not None:
        refine = None
        if not abi.get("anonymous", False):
            refine = partial(_refine_event_topic, topic=event_topic(abi))
        schema = schema.variant(
            "ExpandedEventLog",
            [Field("decoded", Record(inputs), mode=EXPANDED)],
            refine=refine,
        )
    validate(value, schema, strict=strict, aggregate=aggregate)


def ensure_transfer_log(value: Any, expanded: bool, *, strict: Optional[bool] = None,
                        aggregate: Optional[bool] = None) -> None:
    """
    Ensure a value is a transfer log in the given mode.

    Raises:
        ValidationError: If the log does not satisfy its schema
    """
    schema = EXPANDED_TRANSFER_LOG_SCHEMA if expanded else TRANSFER_LOG_SCHEMA
    validate(value, schema, strict=strict, aggregate=aggregate)
