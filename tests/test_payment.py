from __future__ import annotations

import http.client
import io
import json
import urllib.error
from decimal import Decimal
from typing import Any

import pytest

from jobboard.services import payment as payment_module
from jobboard.services.payment import (
    EthereumRpcPaymentVerifier,
    InvalidPaymentError,
    PaymentVerification,
    PaymentVerificationError,
    check_payment,
)

WALLET = "0xA11CE00000000000000000000000000000000001"
TX_HASH = "0x" + "ab" * 32


class _FakeResponse(io.BytesIO):
    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _install_rpc(monkeypatch: pytest.MonkeyPatch, results: dict[str, Any]) -> list[str]:
    calls: list[str] = []

    def fake_urlopen(req, timeout: float = 0):
        body = json.loads(req.data.decode("utf-8"))
        calls.append(body["method"])
        reply = {"jsonrpc": "2.0", "id": body["id"], "result": results.get(body["method"])}
        return _FakeResponse(json.dumps(reply).encode("utf-8"))

    monkeypatch.setattr(payment_module.urllib.request, "urlopen", fake_urlopen)
    return calls


def test_check_payment_accepts_exact_minimum() -> None:
    verification = PaymentVerification(found=True, recipient=WALLET.lower(), amount_eth=Decimal("0.001"), success=True)
    check_payment(verification, admin_wallet=WALLET, min_amount=0.001)


@pytest.mark.parametrize(
    "verification, reason",
    [
        (PaymentVerification(found=False), "Transaction not found"),
        (PaymentVerification(found=True, recipient="0xdead", amount_eth=Decimal("1"), success=True), "Invalid payment transaction"),
        (PaymentVerification(found=True, recipient=WALLET, amount_eth=Decimal("0.0009"), success=True), "Invalid payment transaction"),
        (PaymentVerification(found=True, recipient=WALLET, amount_eth=Decimal("1"), success=False), "Invalid payment transaction"),
        (PaymentVerification(found=True, recipient=None, amount_eth=Decimal("1"), success=True), "Invalid payment transaction"),
    ],
)
def test_check_payment_rejections(verification: PaymentVerification, reason: str) -> None:
    with pytest.raises(InvalidPaymentError) as exc_info:
        check_payment(verification, admin_wallet=WALLET, min_amount=0.001)
    assert exc_info.value.reason == reason


def test_check_payment_rejects_when_admin_wallet_unset() -> None:
    verification = PaymentVerification(found=True, recipient=WALLET, amount_eth=Decimal("1"), success=True)
    with pytest.raises(InvalidPaymentError):
        check_payment(verification, admin_wallet="", min_amount=0.001)


def test_rpc_verifier_reads_transaction_and_receipt(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install_rpc(
        monkeypatch,
        {
            "eth_getTransactionByHash": {"hash": TX_HASH, "to": WALLET, "value": hex(10**15)},
            "eth_getTransactionReceipt": {"status": "0x1"},
        },
    )
    result = EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)
    assert calls == ["eth_getTransactionByHash", "eth_getTransactionReceipt"]
    assert result == PaymentVerification(found=True, recipient=WALLET, amount_eth=Decimal("0.001"), success=True)


def test_rpc_verifier_unknown_transaction(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install_rpc(monkeypatch, {})
    result = EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)
    assert result.found is False
    assert calls == ["eth_getTransactionByHash"]


def test_rpc_verifier_pending_transaction_is_not_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_rpc(
        monkeypatch,
        {"eth_getTransactionByHash": {"hash": TX_HASH, "to": WALLET, "value": "0x1"}, "eth_getTransactionReceipt": None},
    )
    result = EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)
    assert result.found is True
    assert result.success is False


def test_rpc_verifier_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_urlopen(req, timeout: float = 0):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(payment_module.urllib.request, "urlopen", failing_urlopen)
    with pytest.raises(PaymentVerificationError):
        EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)


def test_rpc_verifier_error_reply(monkeypatch: pytest.MonkeyPatch) -> None:
    def error_urlopen(req, timeout: float = 0):
        reply = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "invalid argument"}}
        return _FakeResponse(json.dumps(reply).encode("utf-8"))

    monkeypatch.setattr(payment_module.urllib.request, "urlopen", error_urlopen)
    with pytest.raises(PaymentVerificationError):
        EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)


class _TruncatedResponse(_FakeResponse):
    def read(self, *args: Any) -> bytes:
        raise http.client.IncompleteRead(b'{"jsonrpc"')


def test_rpc_verifier_truncated_reply(monkeypatch: pytest.MonkeyPatch) -> None:
    def truncated_urlopen(req, timeout: float = 0):
        return _TruncatedResponse(b"")

    monkeypatch.setattr(payment_module.urllib.request, "urlopen", truncated_urlopen)
    with pytest.raises(PaymentVerificationError):
        EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)


def test_rpc_verifier_connection_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    def reset_urlopen(req, timeout: float = 0):
        raise ConnectionResetError("reset by peer")

    monkeypatch.setattr(payment_module.urllib.request, "urlopen", reset_urlopen)
    with pytest.raises(PaymentVerificationError):
        EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)


@pytest.mark.parametrize("receipt", ["0x1", ["0x1"], 1])
def test_rpc_verifier_malformed_receipt(monkeypatch: pytest.MonkeyPatch, receipt: Any) -> None:
    _install_rpc(
        monkeypatch,
        {"eth_getTransactionByHash": {"hash": TX_HASH, "to": WALLET, "value": hex(10**15)}, "eth_getTransactionReceipt": receipt},
    )
    with pytest.raises(PaymentVerificationError):
        EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)


def test_rpc_verifier_malformed_transaction(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_rpc(monkeypatch, {"eth_getTransactionByHash": "0xdeadbeef"})
    with pytest.raises(PaymentVerificationError):
        EthereumRpcPaymentVerifier("http://rpc.test").verify(TX_HASH)
