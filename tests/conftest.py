"""
Pytest fixtures for the connex-validator tests.

Every fixture returns a fresh, valid record so tests can mutate it freely.
"""
import pytest

from connex_validator._rate_limited_log import reset_rate_limited_log
from connex_validator.config import NetworkConfig

TESTNET_GENESIS_ID = "0x000000000b2bce3c70bc649a02749e8687721b09ed2e15997f466536b20bb127"
ZERO_ADDRESS = "0x" + "00" * 20
ENERGY_ADDRESS = "0x0000000000000000000000000000456e65726779"
AUTHORITY_ADDRESS = "0x0000000000000000000000417574686f72697479"
ORIGIN = "0xe59d475abe695c7f67a8a2321f33a856b0b4c71d"
RECIPIENT = "0xd3ae78222beadb038203be21ed5ce7c9b1bff602"
TX_ID = "0x9daa5b584a98976dfca3d70348b44ba5332f966e187ba84510efb810a0f9f851"
BLOCK_ID = "0x00000001" + "c3" * 28
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

TRANSFER_EVENT_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "name": "_from", "type": "address"},
        {"indexed": True, "name": "_to", "type": "address"},
        {"indexed": False, "name": "_value", "type": "uint256"},
    ],
    "name": "Transfer",
    "type": "event",
}
CANDIDATE_EVENT_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "name": "nodeMaster", "type": "address"},
        {"indexed": False, "name": "action", "type": "bytes32"},
    ],
    "name": "Candidate",
    "type": "event",
}
NAME_ABI = {
    "constant": True,
    "inputs": [],
    "name": "name",
    "outputs": [{"name": "", "type": "string"}],
    "payable": False,
    "stateMutability": "pure",
    "type": "function",
}
TRANSFER_ABI = {
    "constant": False,
    "inputs": [{"name": "_to", "type": "address"}, {"name": "_amount", "type": "uint256"}],
    "name": "transfer",
    "outputs": [{"name": "success", "type": "bool"}],
    "payable": False,
    "stateMutability": "nonpayable",
    "type": "function",
}
ADD_MASTER_ABI = {
    "constant": False,
    "inputs": [
        {"name": "_nodeMaster", "type": "address"},
        {"name": "_endorsor", "type": "address"},
        {"name": "_identity", "type": "bytes32"},
    ],
    "name": "add",
    "outputs": [],
    "payable": False,
    "stateMutability": "nonpayable",
    "type": "function",
}


def pad_topic(address: str) -> str:
    """Left-pad an address to a 32-byte topic"""
    return "0x" + "00" * 12 + address[2:]


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch):
    """Clear env-driven config, cached networks and suppressed log lines."""
    monkeypatch.delenv("CONNEX_VALIDATOR_STRICT", raising=False)
    monkeypatch.delenv("CONNEX_VALIDATOR_AGGREGATE", raising=False)
    NetworkConfig._networks_cache = None
    reset_rate_limited_log()
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def genesis_block():
    return {
        "id": TESTNET_GENESIS_ID,
        "number": 0,
        "size": 170,
        "parentID": "0xffffffff" + "00" * 28,
        "timestamp": 1530014400,
        "gasLimit": 10000000,
        "beneficiary": ZERO_ADDRESS,
        "gasUsed": 0,
        "totalScore": 0,
        "txsRoot": "0x" + "45b0cfc2" * 8,
        "stateRoot": "0x" + "4ec3af0a" * 8,
        "receiptsRoot": "0x" + "45b0cfc2" * 8,
        "signer": ZERO_ADDRESS,
        "transactions": [],
        "isTrunk": True,
    }


@pytest.fixture
def block(genesis_block):
    blk = dict(genesis_block)
    blk.update({
        "id": BLOCK_ID,
        "number": 1,
        "parentID": TESTNET_GENESIS_ID,
        "timestamp": 1530014410,
        "gasUsed": 21000,
        "totalScore": 1,
        "beneficiary": ORIGIN,
        "signer": ORIGIN,
        "transactions": [TX_ID],
    })
    return blk


@pytest.fixture
def clause():
    return {"to": RECIPIENT, "value": "10000000000000000", "data": "0x"}


@pytest.fixture
def embedded_transaction(clause):
    return {
        "id": TX_ID,
        "chainTag": 39,
        "blockRef": "0x0000000000000000",
        "expiration": 720,
        "clauses": [clause, {"to": None, "value": "0", "data": "0x6080604052"}],
        "gasPriceCoef": 128,
        "gas": 53000,
        "origin": ORIGIN,
        "nonce": "0x016e9d1fa6e7",
        "dependsOn": None,
        "size": 130,
    }


@pytest.fixture
def transaction(embedded_transaction):
    tx = dict(embedded_transaction)
    tx["meta"] = {"blockID": BLOCK_ID, "blockNumber": 1, "blockTimestamp": 1530014410}
    return tx


@pytest.fixture
def log_meta():
    return {
        "blockID": BLOCK_ID,
        "blockNumber": 1,
        "blockTimestamp": 1530014410,
        "txID": TX_ID,
        "txOrigin": ORIGIN,
    }


@pytest.fixture
def event_log():
    """Compact VTHO Transfer event"""
    return {
        "address": ENERGY_ADDRESS,
        "topics": [TRANSFER_TOPIC, pad_topic(ORIGIN), pad_topic(RECIPIENT)],
        "data": "0x" + "00" * 31 + "01",
    }


@pytest.fixture
def expanded_event_log(event_log, log_meta):
    log = dict(event_log)
    log["meta"] = log_meta
    return log


@pytest.fixture
def decoded_transfer():
    return {
        "0": ORIGIN,
        "1": RECIPIENT,
        "2": "1",
        "_from": ORIGIN,
        "_to": RECIPIENT,
        "_value": "1",
        "__length__": 3,
    }


@pytest.fixture
def transfer_log():
    return {"sender": ORIGIN, "recipient": RECIPIENT, "amount": "10000000000000000"}


@pytest.fixture
def expanded_transfer_log(transfer_log, log_meta):
    log = dict(transfer_log)
    log["meta"] = log_meta
    return log


@pytest.fixture
def receipt(event_log, transfer_log, log_meta):
    return {
        "gasUsed": 36582,
        "gasPayer": ORIGIN,
        "paid": "365820000000000000",
        "reward": "109746000000000000",
        "reverted": False,
        "outputs": [
            {"contractAddress": None, "events": [event_log], "transfers": [transfer_log]},
            {"contractAddress": "0x" + "7a" * 20, "events": [], "transfers": []},
        ],
        "meta": log_meta,
    }


@pytest.fixture
def vm_output(event_log):
    return {
        "data": "0x" + "00" * 31 + "01",
        "vmError": "",
        "gasUsed": 14597,
        "reverted": False,
        "events": [event_log],
        "transfers": [],
    }


@pytest.fixture
def reverted_vm_output():
    return {
        "data": "0x08c379a0",
        "vmError": "evm: execution reverted",
        "gasUsed": 2354,
        "reverted": True,
        "events": [],
        "transfers": [],
        "decoded": {"revertReason": "builtin: executor required"},
    }


@pytest.fixture
def status():
    return {
        "progress": 1,
        "head": {"id": BLOCK_ID, "number": 1, "timestamp": 1530014410, "parentID": TESTNET_GENESIS_ID},
    }


@pytest.fixture
def account():
    return {"balance": "25000000000000000000000", "energy": "0", "hasCode": False}
