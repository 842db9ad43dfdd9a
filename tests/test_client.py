"""
Tests for SmartWalletClient against a mocked relaying service.
"""
import pytest
import requests

from smartwallet_sdk.exceptions import (
    EncodingError, PollError, PreparationError, SigningError, SubmissionError
)
from smartwallet_sdk.models import BatchPreparedCalls, Call, Capabilities, SinglePreparedCalls

from tests.conftest import ARRAY_RESPONSE, USER_OP_UNIT, rpc_error, rpc_result
from tests.test_helpers import (
    TEST_ACCOUNT, TEST_API_KEY, TEST_ENDPOINT, TEST_POLICY_ID, TEST_TOKEN, create_test_client
)

MINT_CALL = Call(to=TEST_TOKEN, data="0x40c10f19")


class TestPrepareCalls:
    def test_request_body(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result(USER_OP_UNIT))

        http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)

        body = requests_mock.last_request.json()
        assert body["jsonrpc"] == "2.0"
        assert body["method"] == "wallet_prepareCalls"
        assert body["params"] == [{
            "calls": [{"to": TEST_TOKEN, "data": "0x40c10f19"}],
            "from": TEST_ACCOUNT,
            "chainId": "0x14a34",
            "capabilities": {"paymasterService": {"policyId": TEST_POLICY_ID}},
        }]

    def test_single_unit_response(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result(USER_OP_UNIT))

        prepared = http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)

        assert isinstance(prepared, SinglePreparedCalls)
        assert prepared.unit == USER_OP_UNIT

    def test_array_response_with_delegation(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result(ARRAY_RESPONSE))

        prepared = http_client.prepare_calls(
            [MINT_CALL, {"to": TEST_TOKEN, "data": "0x", "value": 1}],
            TEST_ACCOUNT,
            Capabilities.sponsored(TEST_POLICY_ID, eip7702_auth=True)
        )

        assert isinstance(prepared, BatchPreparedCalls)
        assert len(prepared.units) == 2
        params = requests_mock.last_request.json()["params"][0]
        assert params["capabilities"]["eip7702Auth"] is True
        assert params["calls"][1] == {"to": TEST_TOKEN, "data": "0x", "value": "0x1"}

    def test_rejection(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_error(-32602, "invalid policy"))

        with pytest.raises(PreparationError) as exc_info:
            http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)
        assert exc_info.value.code == -32602
        assert "invalid policy" in str(exc_info.value)

    def test_http_error(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, status_code=503, text="unavailable")

        with pytest.raises(PreparationError) as exc_info:
            http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)
        assert exc_info.value.code == 503

    def test_unreachable_service_does_not_leak_key(self, http_client, requests_mock):
        requests_mock.post(
            TEST_ENDPOINT,
            exc=requests.exceptions.ConnectionError(f"cannot connect to {TEST_ENDPOINT}")
        )

        with pytest.raises(PreparationError) as exc_info:
            http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)
        assert TEST_API_KEY not in str(exc_info.value)

    def test_malformed_response(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result({"unexpected": True}))

        with pytest.raises(PreparationError):
            http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)

    def test_bad_calls_fail_before_request(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result(USER_OP_UNIT))

        with pytest.raises(EncodingError):
            http_client.prepare_calls([], TEST_ACCOUNT)
        with pytest.raises(EncodingError):
            http_client.prepare_calls([{"to": "0x12", "data": "0x"}], TEST_ACCOUNT)
        assert not requests_mock.called


class TestSendPreparedCalls:
    def test_submission(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, [
            {"json": rpc_result(ARRAY_RESPONSE)},
            {"json": rpc_result({"preparedCallIds": ["0xcall"]})},
        ])

        prepared = http_client.prepare_calls([MINT_CALL], TEST_ACCOUNT)
        signed = http_client.sign_prepared_calls(prepared)
        result = http_client.send_prepared_calls(signed)

        assert result.prepared_call_ids == ["0xcall"]
        body = requests_mock.last_request.json()
        assert body["method"] == "wallet_sendPreparedCalls"
        sent = body["params"][0]
        assert sent["type"] == "array"
        assert [u["type"] for u in sent["data"]] == ["authorization", "user-operation-v070"]
        assert all(u["signature"]["type"] == "secp256k1" for u in sent["data"])

    def test_rejection(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_error(-32000, "signature invalid"))
        signed = http_client.sign_prepared_calls(SinglePreparedCalls(unit=USER_OP_UNIT))

        with pytest.raises(SubmissionError) as exc_info:
            http_client.send_prepared_calls(signed)
        assert exc_info.value.code == -32000

    def test_empty_call_ids(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result({"preparedCallIds": []}))
        signed = http_client.sign_prepared_calls(SinglePreparedCalls(unit=USER_OP_UNIT))

        with pytest.raises(SubmissionError):
            http_client.send_prepared_calls(signed)

    def test_signing_without_signer(self, requests_mock):
        client = create_test_client(priv_key=None)

        with pytest.raises(SigningError):
            client.sign_prepared_calls(SinglePreparedCalls(unit=USER_OP_UNIT))


class TestCallsStatus:
    def test_status(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_result({
            "id": "0xcall", "status": 200, "receipts": [{"transactionHash": "0xfeed"}]
        }))

        status = http_client.get_calls_status("0xcall")

        assert status.is_success
        assert status.transaction_hash == "0xfeed"
        assert requests_mock.last_request.json()["params"] == ["0xcall"]

    def test_rejected_query(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, json=rpc_error(-32602, "unknown id"))

        with pytest.raises(PollError) as exc_info:
            http_client.get_calls_status("0xcall")
        assert exc_info.value.code == -32602

    def test_timeout(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, exc=requests.exceptions.ReadTimeout)

        with pytest.raises(PollError):
            http_client.get_calls_status("0xcall")

    def test_wait_until_success(self, http_client, requests_mock):
        requests_mock.post(TEST_ENDPOINT, [
            {"json": rpc_result({"status": 100})},
            {"json": rpc_result({"status": 100})},
            {"json": rpc_result({"status": 200, "receipts": [{"transactionHash": "0xfeed"}]})},
        ])

        status = http_client.wait_for_calls_status("0xcall")

        assert status.transaction_hash == "0xfeed"
        assert requests_mock.call_count == 3


def test_request_account(http_client, requests_mock, signer):
    requests_mock.post(TEST_ENDPOINT, json=rpc_result({"accountAddress": TEST_ACCOUNT, "id": "acct"}))

    account = http_client.request_account()

    assert account.address == TEST_ACCOUNT
    body = requests_mock.last_request.json()
    assert body["method"] == "wallet_requestAccount"
    assert body["params"] == [{"signerAddress": signer.address}]


def test_request_account_failure(http_client, requests_mock):
    requests_mock.post(TEST_ENDPOINT, json=rpc_error(-32600, "bad signer"))

    with pytest.raises(PreparationError):
        http_client.request_account()


def test_send_calls_runs_every_step(http_client, requests_mock):
    requests_mock.post(TEST_ENDPOINT, [
        {"json": rpc_result(USER_OP_UNIT)},
        {"json": rpc_result({"preparedCallIds": ["0xcall"]})},
        {"json": rpc_result({"status": 100})},
        {"json": rpc_result({"status": 200, "receipts": [{"transactionHash": "0xfeed"}]})},
    ])

    status = http_client.send_calls([MINT_CALL], TEST_ACCOUNT)

    assert status.is_success
    methods = [r.json()["method"] for r in requests_mock.request_history]
    assert methods == [
        "wallet_prepareCalls",
        "wallet_sendPreparedCalls",
        "wallet_getCallsStatus",
        "wallet_getCallsStatus",
    ]


def test_send_calls_aborts_on_prepare_failure(http_client, requests_mock):
    requests_mock.post(TEST_ENDPOINT, json=rpc_error(-32602, "nope"))

    with pytest.raises(PreparationError):
        http_client.send_calls([MINT_CALL], TEST_ACCOUNT)
    assert requests_mock.call_count == 1


def test_address_requires_signer():
    client = create_test_client(priv_key=None)
    with pytest.raises(ValueError):
        client.address
