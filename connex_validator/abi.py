"""
ABI-aware rules for `decoded` sub-records.

Decoded values follow the client's conventions: addresses and bytes are
lowercase hex, integers of any width are decimal strings, and every
parameter is reachable both by position ("0", "1", ...) and by name.
"""
import re
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Sequence

from web3 import Web3

from .schema import Field, Format, Kind, ListOf, Rule, Schema
from .types import is_address, is_bytes32, is_decimal_int, is_decimal_uint, is_hex_bytes

logger = logging.getLogger(__name__)

_ARRAY_RE = re.compile(r"^(.*)\[(\d*)\]$")
_BYTES_N_RE = re.compile(r"^bytes([1-9]|[12][0-9]|3[0-2])$")
_UINT_RE = re.compile(r"^uint(\d*)$")
_INT_RE = re.compile(r"^int(\d*)$")

LENGTH_KEY = "__length__"


def _require_abi(abi: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(abi, Mapping):
        raise ValueError(f"ABI must be a dictionary, got {type(abi).__name__}")
    if abi.get("type") != kind:
        raise ValueError(f"Expected a {kind} ABI, got type {abi.get('type')!r}")
    return dict(abi)


def _is_param(param: Any) -> bool:
    return isinstance(param, Mapping) and isinstance(param.get("type"), str)


def _params(abi: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    params = abi.get(key, [])
    if not isinstance(params, list) or not all(_is_param(p) for p in params):
        raise ValueError(f"ABI '{key}' must be a list of parameters with a 'type'")
    return params


def param_rule(param: Dict[str, Any]) -> Rule:
    """
    Build the rule for one decoded ABI parameter.

    Raises:
        ValueError: If the ABI type is not recognised
    """
    if not _is_param(param):
        raise ValueError(f"ABI parameter must have a string 'type', got {param!r}")
    abi_type = param["type"]

    array = _ARRAY_RE.match(abi_type)
    if array:
        inner = dict(param, type=array.group(1))
        length = int(array.group(2)) if array.group(2) else None
        return ListOf(param_rule(inner), length=length)

    if abi_type == "address":
        return Format(is_address, "address")
    if abi_type == "bool":
        return Kind((bool,), "bool")
    if abi_type == "string":
        return Kind((str,), "string")
    if abi_type == "bytes":
        return Format(is_hex_bytes, "hex bytes")
    if abi_type == "tuple":
        return Kind((list, tuple, Mapping), "tuple")

    bytes_n = _BYTES_N_RE.match(abi_type)
    if bytes_n:
        size = int(bytes_n.group(1))
        return Format(lambda v: is_hex_bytes(v, size), abi_type)
    if _UINT_RE.match(abi_type):
        return Format(is_decimal_uint, f"{abi_type} as decimal string")
    if _INT_RE.match(abi_type):
        return Format(is_decimal_int, f"{abi_type} as decimal string")

    raise ValueError(f"Unsupported ABI type: {abi_type}")


def _is_dynamic(abi_type: str) -> bool:
    return abi_type in ("string", "bytes") or abi_type.startswith("tuple") or abi_type.endswith("]")


def event_param_rule(param: Dict[str, Any]) -> Rule:
    """
    Rule for one decoded event argument.

    Indexed arguments of a dynamic type are stored as the keccak-256 hash of
    their encoding, so the decoder can only report that topic hash.
    """
    rule = param_rule(param)
    if param.get("indexed") and _is_dynamic(param["type"]):
        return Format(is_bytes32, "topic hash")
    return rule


def decoded_schema(
    params: Sequence[Dict[str, Any]],
    name: str = "decoded",
    rule_for: Callable[[Dict[str, Any]], Rule] = param_rule,
) -> Schema:
    """
    Schema for a decoded parameter list, keyed by position and by name.
    """
    fields = []
    for index, param in enumerate(params):
        fields.append(Field(str(index), rule_for(param)))
    positional = {f.name for f in fields}
    for param in params:
        param_name = param.get("name") or ""
        if param_name and param_name not in positional:
            fields.append(Field(param_name, rule_for(param)))

    count = len(params)
    fields.append(Field(
        LENGTH_KEY,
        Format(lambda v: v == count, f"{count}", (int,)),
        optional=True,
    ))
    return Schema(name, fields)


def function_outputs_schema(abi: Any) -> Schema:
    abi = _require_abi(abi, "function")
    return decoded_schema(_params(abi, "outputs"), f"{abi.get('name', 'function')} outputs")


def event_inputs_schema(abi: Any) -> Schema:
    abi = _require_abi(abi, "event")
    return decoded_schema(_params(abi, "inputs"), f"{abi.get('name', 'event')} inputs", event_param_rule)


def canonical_type(param: Dict[str, Any]) -> str:
    if not _is_param(param):
        raise ValueError(f"ABI parameter must have a string 'type', got {param!r}")
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        components = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({components}){abi_type[len('tuple'):]}"
    return abi_type


def event_signature(abi: Any) -> str:
    """Canonical signature, e.g. Transfer(address,address,uint256)."""
    abi = _require_abi(abi, "event")
    if not abi.get("name"):
        raise ValueError("Event ABI must have a name")
    types = ",".join(canonical_type(p) for p in _params(abi, "inputs"))
    return f"{abi['name']}({types})"


def event_topic(abi: Any) -> str:
    """topic0 of a non-anonymous event: keccak-256 of its signature."""
    digest = Web3.keccak(text=event_signature(abi))
    return "0x" + bytes(digest).hex()
