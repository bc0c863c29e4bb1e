# defender_client.py
"""Thin client for a Defender-style relayer API.

Two calls are needed: fetch relayer status (used as a liveness check) and
submit a transaction. HTTP failures are turned into relay errors here so the
API layer never looks at status codes or message text.
"""

import logging
from typing import Any

import requests

from errors import AuthenticationFailed, InsufficientFunds, RejectedByChain, RelayError

logger = logging.getLogger(__name__)


class DefenderRelayerClient:
    def __init__(
        self,
        api_key: str,
        api_secret: str,
        api_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings) -> "DefenderRelayerClient":
        return cls(
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            api_url=settings.api_url,
            timeout=settings.timeout,
        )

    def _headers(self) -> dict:
        return {
            "X-Api-Key": self.api_key,
            "Authorization": f"Bearer {self.api_secret}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, payload: dict | None = None) -> Any:
        if not self.api_key or not self.api_secret:
            raise AuthenticationFailed("API key and secret are required")

        resp = self.session.request(
            method,
            f"{self.api_url}{path}",
            json=payload,
            headers=self._headers(),
            timeout=self.timeout,
        )
        if resp.ok:
            return resp.json()

        raise self._error_for(resp)

    @staticmethod
    def _error_for(resp: requests.Response) -> RelayError:
        try:
            body = resp.json()
        except ValueError:
            body = resp.text

        status = resp.status_code
        message = f"Request failed with status code {status}"
        logger.error("Relayer API %s %s -> %s: %s", resp.request.method, resp.url, status, body)

        if status in (401, 403):
            return AuthenticationFailed(message, details=body)
        if "insufficient funds" in resp.text.lower():
            return InsufficientFunds(message, details=body)
        if status == 400:
            return RejectedByChain(message, details=body)
        return RelayError(message, details=body)

    def get_relayer(self) -> dict:
        """Relayer status (address, network, paused, ...)."""
        return self._request("GET", "/relayer")

    def send_transaction(self, tx: dict) -> dict:
        """Submit a transaction; the returned handle carries `hash` and `transactionId`."""
        return self._request("POST", "/txs", tx)
