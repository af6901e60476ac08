"""Client for named remote functions (edge functions) of the hosted backend."""
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds


class FunctionInvocationError(Exception):
    """Raised when a remote function cannot be reached or reports failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FunctionsClient:
    """
    Invokes ``POST <base_url>/<name>`` with a JSON body.

    Attributes:
        base_url: Root URL of the functions endpoint
        api_key: Optional key sent as bearer token
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), headers=headers, timeout=timeout)
        if client is not None:
            self._client.headers.update(headers)

    def invoke(self, name: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.post(f"/{name}", json=body)
        except httpx.HTTPError as e:
            raise FunctionInvocationError(f"Failed to reach function '{name}': {e}")

        if response.is_error:
            try:
                message = response.json().get("error") or response.text
            except ValueError:
                message = response.text or f"HTTP {response.status_code}"
            raise FunctionInvocationError(message, status_code=response.status_code)

        logger.info("Invoked function %s", name)
        try:
            return response.json()
        except ValueError:
            return {}
