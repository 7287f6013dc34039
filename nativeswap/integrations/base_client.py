"""
Base HTTP client for third-party APIs

Shared request/retry plumbing used by the 0x, Moralis and Alchemy clients.
Subclasses pick the exception types raised for network failures and rate
limits, and the headers sent with every request.
"""
import asyncio
import logging
import time
from typing import Any, Dict, Optional, Type

import httpx

from nativeswap.exceptions import NativeSwapBaseException

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Async HTTP client with exponential backoff on transient failures.

    Retries connect errors, timeouts, 5xx responses and 429 responses (honouring
    ``retry-after``). Other 4xx responses are not retried.
    """

    service_name = "api"
    error_class: Type[NativeSwapBaseException] = NativeSwapBaseException
    rate_limit_error_class: Type[NativeSwapBaseException] = NativeSwapBaseException

    def __init__(
        self,
        base_url: str,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        timeout: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout=timeout, connect=10.0),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        )

        self.network_health = {
            "consecutive_failures": 0,
            "last_success": time.time(),
            "is_available": True,
        }

    def _get_headers(self, is_post: bool = False) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        if is_post:
            headers["content-type"] = "application/json"
        return headers

    def _backoff(self, attempt: int) -> float:
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    def _record_failure(self):
        self.network_health["consecutive_failures"] += 1

    def _record_success(self):
        self.network_health["consecutive_failures"] = 0
        self.network_health["last_success"] = time.time()
        self.network_health["is_available"] = True

    async def _make_request_with_retries(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
        raise_for_client_errors: bool = True,
    ) -> httpx.Response:
        """Make an HTTP request with exponential backoff retry logic."""
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers(is_post=(method.upper() == "POST"))
        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                logger.debug(
                    f"Making {method.upper()} request to {url} (attempt {attempt + 1}/{self.max_retries + 1})"
                )
                response = await self._client.request(
                    method, url, params=params, json=json_data, headers=headers
                )
                self._record_success()

                if response.status_code == 429:
                    retry_after = response.headers.get("retry-after")
                    retry_delay = int(retry_after) if retry_after and retry_after.isdigit() else self._backoff(attempt)
                    logger.warning(f"Rate limited by {self.service_name}. Retrying after {retry_delay} seconds.")
                    if attempt < self.max_retries:
                        await asyncio.sleep(retry_delay)
                        continue
                    raise self.rate_limit_error_class(
                        f"{self.service_name} rate limit exceeded after {self.max_retries} retries"
                    )

                if response.status_code >= 500:
                    self._record_failure()
                    logger.warning(
                        f"Server error {response.status_code} for {method.upper()} {url}: {response.text}"
                    )
                    if attempt < self.max_retries:
                        await asyncio.sleep(self._backoff(attempt))
                        continue
                    raise self.error_class(
                        f"{self.service_name} server error after {self.max_retries} retries: "
                        f"{response.status_code} - {response.text}"
                    )

                if response.status_code >= 400 and raise_for_client_errors:
                    logger.error(f"Client error {response.status_code} for {method.upper()} {url}: {response.text}")
                    raise self.error_class(
                        f"{self.service_name} client error: {response.status_code} - {response.text}"
                    )

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                self._record_failure()
                logger.warning(f"Network error for {method.upper()} {url}: {e}")
                if attempt < self.max_retries:
                    delay = self._backoff(attempt)
                    logger.debug(f"Retrying in {delay} seconds...")
                    await asyncio.sleep(delay)
                else:
                    self.network_health["is_available"] = False
                    raise self.error_class(
                        f"{self.service_name} network error after {self.max_retries} retries: {e}"
                    ) from e

            except httpx.RequestError as e:
                last_exception = e
                self._record_failure()
                logger.warning(f"Request error for {method.upper()} {url}: {e}")
                if attempt < self.max_retries:
                    await asyncio.sleep(self._backoff(attempt))
                else:
                    self.network_health["is_available"] = False
                    raise self.error_class(
                        f"{self.service_name} request error after {self.max_retries} retries: {e}"
                    ) from e

        raise self.error_class(f"{self.service_name} request failed: {last_exception}")

    async def close(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()
