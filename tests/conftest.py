"""
Pytest fixtures for the SmartWallet SDK tests.
"""
import time

import pytest

from smartwallet_sdk.relayer._rate_limited_log import reset_rate_limits
from smartwallet_sdk.relayer.stub_transport import StubTransport
from smartwallet_sdk.signer.local import LocalSigner

from tests.test_helpers import (
    TEST_PRIV_KEY, create_test_client, create_test_config
)


# Make time.sleep instantaneous so HTTP retry backoff doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    """Each test starts with an empty rate-limited log cache."""
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def signer():
    return LocalSigner(TEST_PRIV_KEY)


@pytest.fixture
def config():
    return create_test_config()


@pytest.fixture
def stub_transport():
    return StubTransport(statuses=[100, 100, 200])


@pytest.fixture
def stub_client(stub_transport, signer):
    """Client wired to the in-memory relayer."""
    return create_test_client(transport=stub_transport, signer=signer)


@pytest.fixture
def http_client(signer):
    """Client wired to the HTTP transport; use with requests_mock."""
    client = create_test_client(signer=signer)
    yield client
    client.close()


def rpc_result(result, request_id=1):
    """JSON-RPC success envelope"""
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def rpc_error(code, message, request_id=1):
    """JSON-RPC error envelope"""
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


# Shapes returned by the relaying service for wallet_prepareCalls
USER_OP_UNIT = {
    "type": "user-operation-v070",
    "data": {"sender": "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed", "nonce": "0x0"},
    "chainId": "0x14a34",
    "signatureRequest": {
        "type": "personal_sign",
        "data": {"raw": "0x" + "ab" * 32},
    },
}

AUTHORIZATION_UNIT = {
    "type": "authorization",
    "data": {"address": "0x69007702764179f14F51cdce752f4f775d74E139", "nonce": "0x3"},
    "chainId": "0x14a34",
    "signatureRequest": {"type": "eip7702Auth"},
}

ARRAY_RESPONSE = {"type": "array", "data": [AUTHORIZATION_UNIT, USER_OP_UNIT]}
