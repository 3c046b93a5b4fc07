import json
from typing import Any, Dict, Optional

import httpx
from httpx import HTTPStatusError, TimeoutException, TransportError

from rfi_responder.core.exceptions import (
    OracleAuthError,
    OracleError,
    OracleMalformedOutputError,
    OracleQuotaError,
    OracleTimeoutError,
    OracleUnavailableError,
)
from rfi_responder.core.retry import RetryPolicy
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

QUOTA_MARKERS = ("insufficient_quota", "quota", "billing")


class BaseLLMClient:
    """Base client for oracle HTTP interactions.

    Handles bearer authentication, request timeouts, mapping of HTTP failures
    onto the oracle error taxonomy and retries through a ``RetryPolicy``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 60,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: API key for authentication
            base_url: Endpoint URL
            timeout: Request timeout in seconds
            retry_policy: Policy applied to every call (defaults to 3 attempts)
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.transport = transport
        self.logger = LOGGER

    async def call_api(
        self,
        endpoint: str = "",
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST a JSON payload with retries.

        Args:
            endpoint: Path appended to base_url
            payload: JSON payload
            headers: Additional headers

        Returns:
            Parsed JSON response

        Raises:
            OracleAuthError: Credentials rejected (not retried)
            OracleQuotaError: Quota exhausted (not retried)
            OracleTimeoutError: Timed out on every attempt
            OracleUnavailableError: Transient failure on every attempt
        """
        url = f"{self.base_url}{endpoint}" if endpoint else self.base_url

        default_headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if headers:
            default_headers.update(headers)

        self.logger.debug(f"Calling oracle API: {url}", extra={"timeout": self.timeout})

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await self.retry_policy.run(self._post_once, client, url, payload, default_headers)

    async def _post_once(
        self,
        client: httpx.AsyncClient,
        url: str,
        payload: Optional[Dict[str, Any]],
        headers: Dict[str, str],
    ) -> Dict[str, Any]:
        try:
            response = await client.post(url, headers=headers, json=payload)
            response.raise_for_status()
        except HTTPStatusError as e:
            raise self._map_http_error(e, url) from e
        except TimeoutException as e:
            self.logger.warning("Oracle API timeout", extra={"url": url})
            raise OracleTimeoutError(f"Oracle API timed out after {self.timeout}s", original_error=e) from e
        except TransportError as e:
            self.logger.warning("Oracle API transport error", extra={"url": url, "error": str(e)})
            raise OracleUnavailableError(f"Oracle API unreachable: {e}", original_error=e) from e

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise OracleMalformedOutputError("Oracle API returned a non-JSON body", original_error=e) from e

    def _map_http_error(self, error: HTTPStatusError, url: str) -> OracleError:
        """Translate an HTTP status failure into the oracle error taxonomy."""
        status_code = error.response.status_code
        error_body = error.response.text or ""

        self.logger.warning(
            f"Oracle API HTTP error {status_code}",
            extra={"url": url, "status_code": status_code, "error_body": error_body[:500]},
        )

        if status_code in (401, 403):
            return OracleAuthError(f"Oracle API authentication failed ({status_code})", original_error=error)
        if status_code == 429:
            if any(marker in error_body.lower() for marker in QUOTA_MARKERS):
                return OracleQuotaError("Oracle API quota exceeded", original_error=error)
            return OracleUnavailableError("Oracle API rate limited (429)", original_error=error)
        if status_code >= 500:
            return OracleUnavailableError(f"Oracle API server error {status_code}", original_error=error)
        return OracleError(f"Oracle API client error {status_code}: {error_body[:200]}", original_error=error)
