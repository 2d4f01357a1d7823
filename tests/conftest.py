from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient

ADMIN_WALLET = "0xA11CE00000000000000000000000000000000001"


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret"
    os.environ["ADMIN_WALLET"] = ADMIN_WALLET
    os.environ["MIN_PAYMENT_ETH"] = "0.001"
    os.environ.pop("SKILL_VOCABULARY", None)
    os.environ.pop("ETH_RPC_URL", None)
    os.environ.pop("INFURA_API_KEY", None)


class FakePaymentVerifier:
    """Answers from a dict of tx hash -> PaymentVerification (or exception to raise)."""

    def __init__(self, payments: dict[str, Any]) -> None:
        self.payments = payments
        self.calls: list[str] = []

    def verify(self, tx_hash: str):
        from jobboard.services.payment import PaymentVerification

        self.calls.append(tx_hash)
        outcome = self.payments.get(tx_hash, PaymentVerification(found=False))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture()
def payments() -> dict[str, Any]:
    return {}


@pytest.fixture()
def payment_verifier(payments: dict[str, Any]) -> FakePaymentVerifier:
    return FakePaymentVerifier(payments)


@pytest.fixture()
def client(payment_verifier: FakePaymentVerifier) -> Any:
    from jobboard.database import Base, engine
    from jobboard.main import create_app
    from jobboard.routers.dependencies import get_payment_verifier

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app()
    app.dependency_overrides[get_payment_verifier] = lambda: payment_verifier
    with TestClient(app) as c:
        yield c
