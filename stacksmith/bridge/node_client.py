"""Node client: account nonce lookup and transaction broadcast over HTTP.

Bridge boundary
---------------
Two endpoints of a Stacks node are consumed, with fixed shapes:

- ``GET {base}/v2/accounts/{address}`` returns JSON with an integer
  ``nonce`` (and a ``balance`` string, unused here).
- ``POST {base}/v2/transactions`` takes the raw signed transaction as an
  ``application/octet-stream`` body and answers 2xx with the txid as a
  JSON string, or non-2xx with a diagnostic body.

Every request carries a timeout and redirects are not followed; only a
2xx status counts as success.  Nothing is retried: a failed call
raises and the caller decides what happens next.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from stacksmith.errors import NetworkError, ProtocolError, RejectedTransactionError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class NodeClient:
    """Blocking client for one Stacks node.

    Parameters
    ----------
    base_url:
        Node RPC address, e.g. ``http://localhost:20443``.
    timeout:
        Per-request timeout in seconds (connect and read).
    session:
        ``requests.Session`` to issue requests with.  A new one is created
        if not provided.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_account_nonce(self, address: str) -> int:
        """Return the next nonce the node expects from *address*.

        Raises
        ------
        NetworkError
            On connection failure or timeout.
        ProtocolError
            On a non-2xx answer or a body without an integer ``nonce``.
        """
        url = f"{self._base_url}/v2/accounts/{address}"
        response = self._request("GET", url)
        if not self._is_success(response):
            raise ProtocolError(
                f"Account lookup for {address} failed "
                f"(HTTP {response.status_code}): {response.text}"
            )

        body = self._decode_json(response, url)
        nonce = body.get("nonce") if isinstance(body, dict) else None
        if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
            raise ProtocolError(f"Account response from {url} has no valid nonce: {body!r}")

        logger.debug("Node reports nonce %d for %s", nonce, address)
        return nonce

    def broadcast_transaction(self, raw: bytes) -> str:
        """Broadcast signed transaction bytes and return the node's txid.

        Raises
        ------
        NetworkError
            On connection failure or timeout.
        RejectedTransactionError
            On a non-2xx answer; carries the status and full body.
        ProtocolError
            If a 2xx body is not a JSON string.
        """
        url = f"{self._base_url}/v2/transactions"
        response = self._request(
            "POST",
            url,
            data=raw,
            headers={"Content-Type": "application/octet-stream"},
        )
        if not self._is_success(response):
            logger.error(
                "Node rejected transaction (HTTP %d): %s",
                response.status_code,
                response.text,
            )
            raise RejectedTransactionError(response.status_code, response.text)

        txid = self._decode_json(response, url)
        if not isinstance(txid, str) or not txid:
            raise ProtocolError(f"Broadcast response from {url} is not a txid: {txid!r}")
        return txid

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(
                method, url, timeout=self._timeout, allow_redirects=False, **kwargs
            )
        except requests.Timeout as exc:
            raise NetworkError(f"{method} {url} timed out after {self._timeout}s") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _is_success(response: requests.Response) -> bool:
        # redirects and 304 are failures, not success
        return 200 <= response.status_code < 300

    @staticmethod
    def _decode_json(response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise ProtocolError(f"Unparseable response from {url}: {response.text!r}") from exc
