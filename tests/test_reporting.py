"""
Tests for verdict and assertion plumbing.
"""
import logging
from unittest.mock import MagicMock

import pytest

from connex_validator import assert_valid, check, ensure_block, ensure_event_log, ensure_vm_output
from connex_validator.exceptions import FormatError, ModeMismatchError, TypeMismatchError
from connex_validator.reporting import Verdict

from conftest import TRANSFER_EVENT_ABI


def test_passing_verdict(block):
    verdict = check(ensure_block, block)
    assert verdict
    assert verdict.passed
    assert verdict.errors == ()
    assert verdict.message == "ok"


def test_failing_verdict(block):
    block["id"] = block["id"][:-2]
    verdict = check(ensure_block, block)
    assert not verdict
    assert isinstance(verdict.errors[0], FormatError)
    assert verdict.paths == ("id",)
    assert verdict.message.startswith("id: expected bytes32")


def test_mode_arguments_pass_through(expanded_event_log):
    assert check(ensure_event_log, expanded_event_log, True)
    verdict = check(ensure_event_log, expanded_event_log, False)
    assert isinstance(verdict.errors[0], ModeMismatchError)


def test_aggregate_verdict_lists_every_error(block):
    block["id"] = "0x00"
    block["number"] = "1"
    verdict = check(ensure_block, block, aggregate=True)
    assert verdict.paths == ("id", "number")
    assert isinstance(verdict.errors[1], TypeMismatchError)
    assert "; " in verdict.message


def test_non_validation_errors_propagate(vm_output):
    with pytest.raises(ValueError, match="function ABI"):
        check(ensure_vm_output, vm_output, abi=TRANSFER_EVENT_ABI)


def test_failures_logged_once(block):
    block["id"] = "0x00"
    mock_logger = MagicMock()
    check(ensure_block, block, log_failures=True, logger_instance=mock_logger)
    check(ensure_block, block, log_failures=True, logger_instance=mock_logger)
    mock_logger.warning.assert_called_once()
    assert "ensure_block rejected record" in mock_logger.warning.call_args[0][0]


def test_failures_not_logged_by_default(block, caplog):
    block["id"] = "0x00"
    with caplog.at_level(logging.WARNING, logger="connex_validator"):
        check(ensure_block, block)
    assert caplog.records == []


def test_assert_valid(block):
    assert_valid(ensure_block, block)
    block["signer"] = "0x00"
    with pytest.raises(AssertionError, match="signer") as exc_info:
        assert_valid(ensure_block, block)
    assert isinstance(exc_info.value.__cause__, FormatError)


def test_verdict_is_immutable():
    verdict = Verdict(True)
    with pytest.raises(AttributeError):
        verdict.passed = False
