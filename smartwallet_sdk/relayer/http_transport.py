"""
HTTP JSON-RPC transport for the relaying service.
"""
import itertools
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .transport import RelayerTransport
from .exceptions import (
    RelayerError, RelayerConnectionError, RelayerResponseError, RelayerTimeoutError
)

logger = logging.getLogger(__name__)

# Requests that change relayer state; never re-sent once they reached the service
NON_IDEMPOTENT_METHODS = frozenset({"wallet_prepareCalls", "wallet_sendPreparedCalls"})


def validate_relayer_url(url: str) -> None:
    """
    Validate the relayer URL is secure.

    Args:
        url: Relayer URL to validate

    Raises:
        ValueError: If URL is invalid or uses insecure HTTP on a remote host
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ""
    is_local = host in ("localhost", "127.0.0.1", "::1")
    if not parsed.scheme or not host:
        raise ValueError(f"Invalid relayer URL '{url}'")
    if parsed.scheme != "https" and not is_local:
        raise ValueError(f"Relayer URL must use https:// for security (got: {parsed.scheme}://)")


def _session(retries: Retry, api_key: str) -> requests.Session:
    session = requests.Session()
    session.headers["Authorization"] = f"Bearer {api_key}"
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


class HttpTransport(RelayerTransport):
    """
    Wallet API client speaking JSON-RPC 2.0 over HTTPS.

    The API key travels in an ``Authorization: Bearer`` header so it never
    shows up in URLs or request logs.

    Lookups (account and status queries) retry connection errors and 5xx
    responses. Preparing and submitting calls only retries failures to
    connect, where nothing reached the service; anything after that is left
    to the caller.
    """

    def __init__(
        self,
        relayer_url: str,
        api_key: str,
        retry_count: int = 3,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the HTTP transport

        Args:
            relayer_url: Wallet API URL (e.g., "https://api.g.alchemy.com/v2")
            api_key: Service access credential
            retry_count: Number of retries for connection errors (and 5xx responses on lookups)
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        validate_relayer_url(relayer_url)
        self.endpoint = relayer_url.rstrip('/')
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)

        self.session = _session(
            Retry(
                total=retry_count,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["POST"],
                raise_on_status=False,
                connect=retry_count,
                read=retry_count,
                other=retry_count
            ),
            api_key
        )
        self.submit_session = _session(
            Retry(
                total=retry_count,
                backoff_factor=0.5,
                allowed_methods=["POST"],
                raise_on_status=False,
                connect=retry_count,
                read=0,
                status=0,
                other=0
            ),
            api_key
        )

    def request_account(self, signer_address: str) -> Dict[str, Any]:
        return self._rpc_call("wallet_requestAccount", [{"signerAddress": signer_address}])

    def prepare_calls(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc_call("wallet_prepareCalls", [request])

    def send_prepared_calls(self, signed: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc_call("wallet_sendPreparedCalls", [signed])

    def get_calls_status(self, call_id: str) -> Dict[str, Any]:
        return self._rpc_call("wallet_getCallsStatus", [call_id])

    def close(self) -> None:
        self.session.close()
        self.submit_session.close()

    def _rpc_call(self, method: str, params: List[Any]) -> Any:
        """
        Perform one JSON-RPC request and return its ``result`` member.

        Raises:
            RelayerTimeoutError: If the request times out
            RelayerConnectionError: If the service cannot be reached
            RelayerResponseError: On HTTP error status, invalid JSON or a JSON-RPC error
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        self.logger.debug(f"Relayer request {method}: {self._sanitize(params)}")

        try:
            session = self.submit_session if method in NON_IDEMPOTENT_METHODS else self.session
            response = session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise RelayerTimeoutError(f"{method} timed out after {self.timeout}s") from e
        except requests.ConnectionError as e:
            raise RelayerConnectionError(f"{method} failed to reach relayer: {e}") from e
        except requests.RequestException as e:
            raise RelayerError(f"{method} request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                raise RelayerResponseError(
                    f"{method} failed with HTTP {response.status_code}", response.status_code
                ) from e
            raise RelayerResponseError(f"Invalid JSON response from relayer for {method}") from e

        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            if isinstance(error, dict):
                message = error.get("message") or str(error)
                code = error.get("code")
            else:
                message, code = str(error), None
            self.logger.error(f"Relayer rejected {method}: {message} (code: {code})")
            raise RelayerResponseError(f"{method} rejected: {message}", code)

        if response.status_code >= 400:
            raise RelayerResponseError(
                f"{method} failed with HTTP {response.status_code}", response.status_code
            )

        if not isinstance(body, dict) or "result" not in body:
            raise RelayerResponseError(f"Missing result in relayer response for {method}: {body}")

        self.logger.debug(f"Relayer response {method}: {body['result']}")
        return body["result"]

    @staticmethod
    def _sanitize(params: List[Any]) -> List[Any]:
        """
        Remove signatures from request params for logging

        Args:
            params: JSON-RPC params to sanitize

        Returns:
            Sanitized params for safe logging
        """
        def scrub(value: Any) -> Any:
            if isinstance(value, dict):
                return {
                    k: ("[REDACTED]" if k == "signature" else scrub(v))
                    for k, v in value.items()
                }
            if isinstance(value, list):
                return [scrub(v) for v in value]
            return value

        return scrub(params)
