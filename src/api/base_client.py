"""
Base API client with common functionality
"""

import asyncio
from abc import ABC
from typing import Optional, Dict, Any
import httpx
from src.utils.logger import logger
from src.utils.error_handler import APIError
from src.config.constants import MAX_RETRIES, RETRY_DELAY

# Status codes worth retrying: rate limiting and server-side failures
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Status codes for which the server did not apply the request
UNAPPLIED_STATUS_CODES = {429, 503}

# Transport errors raised before the request reached the server
UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)


class BaseAPIClient(ABC):
    """Base class for API clients with common functionality"""

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_delay: float = RETRY_DELAY,
    ):
        """
        Initialize base API client

        Args:
            base_url: Base URL for API
            timeout: Request timeout in seconds
            headers: Headers sent with every request
            transport: Custom httpx transport (tests pass httpx.MockTransport)
            retry_delay: Base delay between retries in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)
        self.logger = logger

    def _should_retry(self, error: Exception, idempotent: bool) -> bool:
        """Whether a failed attempt may be sent again"""
        if isinstance(error, httpx.HTTPStatusError):
            codes = RETRYABLE_STATUS_CODES if idempotent else UNAPPLIED_STATUS_CODES
            return error.response.status_code in codes
        if idempotent:
            return True
        return isinstance(error, UNSENT_ERRORS)

    async def _request(
        self,
        method: str,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        retries: int = MAX_RETRIES,
        idempotent: bool = True,
    ) -> Dict[str, Any]:
        """
        Make HTTP request with retry logic

        Non-idempotent requests (appends, positional deletes) are repeated only
        when the server cannot have applied them: a 429/503 answer or a
        connection that was never established. A lost response is not retried.

        Args:
            method: HTTP method (GET, POST, PUT)
            endpoint: API endpoint
            headers: Request headers
            params: Query parameters
            json_data: JSON body
            retries: Number of attempts
            idempotent: Whether repeating an applied request is harmless

        Returns:
            Response data as dictionary

        Raises:
            APIError: If request fails after all retries or cannot be retried
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        for attempt in range(retries):
            try:
                self.logger.debug(f"Request: {method} {url} (attempt {attempt + 1}/{retries})")

                request_kwargs = {
                    "method": method,
                    "url": url,
                    "headers": headers,
                    "params": params,
                }

                if json_data is not None:
                    request_kwargs["json"] = json_data
                    self.logger.debug(f"Request JSON data: {json_data}")

                response = await self.client.request(**request_kwargs)

                self.logger.debug(f"Response status: {response.status_code}")
                if response.status_code >= 400:
                    self.logger.warning(f"Error response body: {response.text[:1000]}")

                response.raise_for_status()

                # Handle empty response (204 No Content or empty body)
                if response.status_code == 204 or not response.text.strip():
                    return {}

                return response.json()

            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                if attempt < retries - 1 and self._should_retry(e, idempotent):
                    self.logger.warning(
                        f"{method} {endpoint} failed ({e}), "
                        f"retrying in {self.retry_delay * (attempt + 1)} seconds..."
                    )
                    await asyncio.sleep(self.retry_delay * (attempt + 1))
                    continue

                self.logger.error(f"Request failed after {attempt + 1} attempts: {e}")
                if isinstance(e, httpx.HTTPStatusError):
                    status_code = e.response.status_code
                    raise APIError(
                        f"{method} {endpoint} returned {status_code}",
                        error_code=str(status_code),
                    ) from e
                raise APIError(f"{method} {endpoint} failed: {e}") from e

        raise APIError(f"{method} {endpoint} was not attempted (retries={retries})")

    async def get(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make GET request"""
        return await self._request("GET", endpoint, headers=headers, params=params)

    async def post(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        idempotent: bool = False,
    ) -> Dict[str, Any]:
        """Make POST request; not repeated after a lost response unless idempotent"""
        return await self._request(
            "POST", endpoint, headers=headers, params=params, json_data=json_data, idempotent=idempotent
        )

    async def put(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make PUT request"""
        return await self._request("PUT", endpoint, headers=headers, params=params, json_data=json_data)

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
