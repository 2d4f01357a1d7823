from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from decimal import Decimal
from itertools import count
from typing import Any, Protocol


logger = logging.getLogger(__name__)

WEI_PER_ETHER = Decimal(10) ** 18


class PaymentVerificationError(RuntimeError):
    """The payment could not be checked (RPC unreachable, malformed reply)."""


class InvalidPaymentError(ValueError):
    """The payment was checked and does not entitle the caller to post a job."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class PaymentVerification:
    found: bool
    recipient: str | None = None
    amount_eth: Decimal = Decimal(0)
    success: bool = False


class PaymentVerifier(Protocol):
    def verify(self, tx_hash: str) -> PaymentVerification: ...


def check_payment(verification: PaymentVerification, *, admin_wallet: str, min_amount: float | Decimal) -> None:
    if not verification.found:
        raise InvalidPaymentError("Transaction not found")
    recipient = (verification.recipient or "").lower()
    if (
        not admin_wallet
        or recipient != admin_wallet.lower()
        or verification.amount_eth < Decimal(str(min_amount))
        or not verification.success
    ):
        raise InvalidPaymentError("Invalid payment transaction")


def _hex_to_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 16)
    except ValueError as exc:
        raise PaymentVerificationError(f"rpc_malformed_quantity: {value!r}") from exc


class EthereumRpcPaymentVerifier(PaymentVerifier):
    """Checks a transaction through a standard Ethereum JSON-RPC endpoint."""

    def __init__(self, rpc_url: str, *, timeout: float = 10.0) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._ids = count(1)

    def _call(self, method: str, params: list[Any]) -> Any:
        body = json.dumps({"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}).encode("utf-8")
        req = urllib.request.Request(
            self.rpc_url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            # The endpoint URL may embed an API key; keep it out of the message.
            raise PaymentVerificationError(f"rpc_failed: {method} http_{e.code}") from e
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            raise PaymentVerificationError(f"rpc_failed: {method}") from e

        if not isinstance(payload, dict):
            raise PaymentVerificationError(f"rpc_failed: {method} unexpected reply")
        if payload.get("error"):
            raise PaymentVerificationError(f"rpc_failed: {method} {payload['error']}")
        return payload.get("result")

    def verify(self, tx_hash: str) -> PaymentVerification:
        tx = self._call("eth_getTransactionByHash", [tx_hash])
        if not tx:
            return PaymentVerification(found=False)
        if not isinstance(tx, dict):
            raise PaymentVerificationError("rpc_failed: eth_getTransactionByHash unexpected result")

        receipt = self._call("eth_getTransactionReceipt", [tx_hash])
        if receipt is not None and not isinstance(receipt, dict):
            raise PaymentVerificationError("rpc_failed: eth_getTransactionReceipt unexpected result")
        # No receipt yet means the transaction is still pending.
        success = bool(receipt) and _hex_to_int(receipt.get("status")) == 1
        amount = Decimal(_hex_to_int(tx.get("value"))) / WEI_PER_ETHER
        logger.debug("payment tx=%s to=%s amount=%s success=%s", tx_hash, tx.get("to"), amount, success)
        return PaymentVerification(found=True, recipient=tx.get("to"), amount_eth=amount, success=success)


class UnconfiguredPaymentVerifier(PaymentVerifier):
    def verify(self, tx_hash: str) -> PaymentVerification:
        raise PaymentVerificationError("payment verification is not configured (set ETH_RPC_URL or INFURA_API_KEY)")
