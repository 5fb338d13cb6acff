"""
Typed record models for the Thor client API.

Records whose shape depends on a mode are separate classes (compact vs
expanded logs, successful vs reverted VM outputs), and the parse_* helpers
only build a variant after the record passed the matching validator.
"""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .validators import (
    ensure_account,
    ensure_block,
    ensure_event_criteria,
    ensure_event_log,
    ensure_status,
    ensure_transaction,
    ensure_transaction_receipt,
    ensure_transfer_log,
    ensure_vm_output,
)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TxMeta(_Record):
    """Block linkage of a transaction"""
    block_id: str = Field(..., alias="blockID")
    block_number: int = Field(..., alias="blockNumber")
    block_timestamp: int = Field(..., alias="blockTimestamp")


class LogMeta(TxMeta):
    """Block and transaction linkage of a receipt or log"""
    tx_id: str = Field(..., alias="txID")
    tx_origin: str = Field(..., alias="txOrigin")


class Clause(_Record):
    to: Optional[str]
    value: str
    data: str


class EmbeddedTransaction(_Record):
    """Transaction as listed inside an expanded block"""
    id: str
    chain_tag: int = Field(..., alias="chainTag")
    block_ref: str = Field(..., alias="blockRef")
    expiration: int
    clauses: List[Clause]
    gas_price_coef: int = Field(..., alias="gasPriceCoef")
    gas: int
    origin: str
    nonce: str
    depends_on: Optional[str] = Field(..., alias="dependsOn")
    size: int


class Transaction(EmbeddedTransaction):
    meta: Optional[TxMeta]

    @property
    def pending(self) -> bool:
        return self.meta is None


class _BlockHeader(_Record):
    id: str
    number: int
    size: int
    parent_id: str = Field(..., alias="parentID")
    timestamp: int
    gas_limit: int = Field(..., alias="gasLimit")
    beneficiary: str
    gas_used: int = Field(..., alias="gasUsed")
    total_score: int = Field(..., alias="totalScore")
    txs_root: str = Field(..., alias="txsRoot")
    state_root: str = Field(..., alias="stateRoot")
    receipts_root: str = Field(..., alias="receiptsRoot")
    signer: str
    is_trunk: bool = Field(..., alias="isTrunk")

    @property
    def is_genesis(self) -> bool:
        return self.number == 0


class Block(_BlockHeader):
    transactions: List[str]


class ExpandedBlock(_BlockHeader):
    transactions: List[EmbeddedTransaction]


class Head(_Record):
    id: str
    number: int
    timestamp: int
    parent_id: str = Field(..., alias="parentID")


class Status(_Record):
    progress: float
    head: Head


class Account(_Record):
    balance: str
    energy: str
    has_code: bool = Field(..., alias="hasCode")

    @property
    def balance_wei(self) -> int:
        return int(self.balance)

    @property
    def energy_wei(self) -> int:
        return int(self.energy)


class EventLog(_Record):
    """Compact event log, as found in receipts and VM outputs"""
    address: str
    topics: List[str]
    data: str


class ExpandedEventLog(EventLog):
    """Event log from a filter, with linkage and optional decoded arguments"""
    meta: LogMeta
    decoded: Optional[Dict[str, Any]] = None


class TransferLog(_Record):
    sender: str
    recipient: str
    amount: str

    @property
    def amount_wei(self) -> int:
        return int(self.amount)


class ExpandedTransferLog(TransferLog):
    meta: LogMeta


class Output(_Record):
    contract_address: Optional[str] = Field(..., alias="contractAddress")
    events: List[EventLog]
    transfers: List[TransferLog]


class TransactionReceipt(_Record):
    gas_used: int = Field(..., alias="gasUsed")
    gas_payer: str = Field(..., alias="gasPayer")
    paid: str
    reward: str
    reverted: bool
    outputs: List[Output]
    meta: LogMeta


class RevertReason(_Record):
    revert_reason: str = Field(..., alias="revertReason")


class _VMOutputBase(_Record):
    data: str
    vm_error: str = Field(..., alias="vmError")
    gas_used: int = Field(..., alias="gasUsed")
    events: List[EventLog]
    transfers: List[TransferLog]


class VMOutput(_VMOutputBase):
    """Output of a call that completed"""
    reverted: Literal[False]
    decoded: Optional[Dict[str, Any]] = None


class RevertedVMOutput(_VMOutputBase):
    """Output of a call that reverted, with the decoded reason if any"""
    reverted: Literal[True]
    decoded: Optional[RevertReason] = None


class EventCriteria(_Record):
    address: Optional[str] = None
    topic0: Optional[str] = None
    topic1: Optional[str] = None
    topic2: Optional[str] = None
    topic3: Optional[str] = None
    topic4: Optional[str] = None


def parse_block(value: Any, expanded: bool = False, **kwargs: Any) -> Union[Block, ExpandedBlock]:
    ensure_block(value, expanded, **kwargs)
    model = ExpandedBlock if expanded else Block
    return model.model_validate(value)


def parse_status(value: Any, **kwargs: Any) -> Status:
    ensure_status(value, **kwargs)
    return Status.model_validate(value)


def parse_account(value: Any, **kwargs: Any) -> Account:
    ensure_account(value, **kwargs)
    return Account.model_validate(value)


def parse_transaction(value: Any, **kwargs: Any) -> Transaction:
    ensure_transaction(value, **kwargs)
    return Transaction.model_validate(value)


def parse_transaction_receipt(value: Any, **kwargs: Any) -> TransactionReceipt:
    ensure_transaction_receipt(value, **kwargs)
    return TransactionReceipt.model_validate(value)


def parse_vm_output(value: Any, abi: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Union[VMOutput, RevertedVMOutput]:
    """
    Validate a VM output and build the variant matching its `reverted` flag.
    """
    ensure_vm_output(value, abi, **kwargs)
    model = RevertedVMOutput if value["reverted"] else VMOutput
    return model.model_validate(value)


def parse_event_criteria(value: Any, **kwargs: Any) -> EventCriteria:
    ensure_event_criteria(value, **kwargs)
    return EventCriteria.model_validate(value)


def parse_event_log(value: Any, expanded: bool, abi: Optional[Dict[str, Any]] = None,
                    **kwargs: Any) -> Union[EventLog, ExpandedEventLog]:
    ensure_event_log(value, expanded, abi, **kwargs)
    model = ExpandedEventLog if expanded else EventLog
    return model.model_validate(value)


def parse_transfer_log(value: Any, expanded: bool, **kwargs: Any) -> Union[TransferLog, ExpandedTransferLog]:
    ensure_transfer_log(value, expanded, **kwargs)
    model = ExpandedTransferLog if expanded else TransferLog
    return model.model_validate(value)
