"""
Validators for responses returned by a wallet's signing service.

Only the response shapes are checked; requesting signatures and verifying
certificate signatures belong to the wallet integration.
"""
from typing import Any, Optional

from .schema import Field, Format, Kind, Record, Schema, validate
from .types import is_hex_bytes
from .validators import ADDRESS, BYTES32, UINT

SIGNATURE_LENGTH = 65

TX_RESPONSE_SCHEMA = Schema("TxResponse", [
    Field("txid", BYTES32),
    Field("signer", ADDRESS),
])

CERT_ANNEX_SCHEMA = Schema("CertAnnex", [
    Field("domain", Kind((str,), "string")),
    Field("timestamp", UINT),
    Field("signer", ADDRESS),
])

CERT_RESPONSE_SCHEMA = Schema("CertResponse", [
    Field("annex", Record(CERT_ANNEX_SCHEMA)),
    Field("signature", Format(lambda v: is_hex_bytes(v, SIGNATURE_LENGTH), "65-byte signature")),
])


def ensure_tx_response(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    """Ensure a value is a signed-transaction response (txid and signer)."""
    validate(value, TX_RESPONSE_SCHEMA, strict=strict, aggregate=aggregate)


def ensure_cert_response(value: Any, *, strict: Optional[bool] = None, aggregate: Optional[bool] = None) -> None:
    """Ensure a value is a signed-certificate response (annex and signature)."""
    validate(value, CERT_RESPONSE_SCHEMA, strict=strict, aggregate=aggregate)
