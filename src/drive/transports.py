import asyncio
import json
from typing import Any, Dict, Optional

import requests
from src.drive.errors import ApiRequestError, TransportUnavailableError
from src.drive.transport_protocol import GITHUB_API, REQUEST_TIMEOUT, TransportProtocol


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return f"GitHub API request failed with status code: {response.status_code}. {payload['message']}"
    return f"GitHub API request failed with status code: {response.status_code}. Response: {response.text}"


class _RequestsTransport(TransportProtocol):
    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/vnd.github.v3+json"}

    def _get(self, api_path: str) -> Any:
        url = f"{self.base_url}/{api_path}"
        try:
            response = requests.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise TransportUnavailableError(f"Cannot reach {url}: {exc}") from exc

        if response.status_code != 200:
            raise ApiRequestError(response.status_code, response.text, _error_message(response))

        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            raise ApiRequestError(response.status_code, response.text, f"Invalid JSON from {url}") from exc

    async def request(self, api_path: str) -> Any:
        return await asyncio.to_thread(self._get, api_path)


class DirectTransport(_RequestsTransport):
    """Unauthenticated client-side calls straight to the GitHub API."""

    def __init__(self, api_url: str = GITHUB_API, timeout: float = REQUEST_TIMEOUT):
        super().__init__(api_url, timeout)


class ProxiedTransport(_RequestsTransport):
    """Calls routed through the host server's GitHub proxy.

    The proxy holds the application credentials, so requests made through it
    are subject to the authenticated rate limit. The host session token, when
    supplied, is forwarded as-is.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, timeout: float = REQUEST_TIMEOUT):
        super().__init__(base_url or "", timeout)
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _get(self, api_path: str) -> Any:
        if not self.base_url:
            raise TransportUnavailableError("No GitHub proxy configured")
        return super()._get(api_path)
