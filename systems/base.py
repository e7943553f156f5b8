"""
Async base class for object storage systems.
"""

import asyncio
import logging
import time
from typing import Callable, Iterable, Mapping, Optional

import aiohttp

from configuration import REQUEST_TIMEOUT_SECONDS
from common.errors import TransportError, make_api_error
from common.transport import AiohttpTransport, HttpResponse, HttpTransport

logger = logging.getLogger(__name__)


class ObjectStorageSystem:
    """Async base class holding the endpoint, credentials and HTTP transport.

    Subclasses provide ``_sign_request`` and the object operations. Endpoint
    and credentials are fixed at construction, so one instance can be shared
    by any number of concurrent tasks.
    """

    def __init__(
        self,
        endpoint: str,
        access_key_id: str,
        access_key_secret: str,
        transport: Optional[HttpTransport] = None,
        timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
        use_https: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        self._endpoint = self._normalize_endpoint(endpoint)
        self._access_key_id = access_key_id
        self._access_key_secret = access_key_secret

        self.transport = transport if transport is not None else AiohttpTransport()
        self.timeout = timeout
        self.scheme = "https" if use_https else "http"
        self.clock = clock

        logger.info(
            f"Initialized {type(self).__name__} for {self.scheme}://{self._endpoint} "
            f"(timeout={timeout})"
        )

    @staticmethod
    def _normalize_endpoint(endpoint: str) -> str:
        endpoint = endpoint.strip()
        for prefix in ("https://", "http://"):
            if endpoint.startswith(prefix):
                endpoint = endpoint[len(prefix):]
        return endpoint.rstrip("/")

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def access_key_id(self) -> str:
        return self._access_key_id

    @property
    def access_key_secret(self) -> str:
        return self._access_key_secret

    def __repr__(self):
        return (
            f"{type(self).__name__}(endpoint={self._endpoint!r}, "
            f"access_key_id={self._access_key_id!r})"
        )

    async def __aenter__(self):
        """Async context manager entry: opens the transport's connection pool."""
        await self.transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.transport.__aexit__(exc_type, exc_val, exc_tb)

    def _sign_request(self, method: str, bucket: str, key: str, headers: dict) -> None:
        """Add authentication to ``headers`` in place."""
        raise NotImplementedError

    def _object_url(self, bucket: str, key: str) -> str:
        raise NotImplementedError

    async def _request(
        self,
        method: str,
        bucket: str,
        key: str,
        headers: Optional[Mapping[str, str]] = None,
        data: Optional[bytes] = None,
        accept_statuses: Iterable[int] = (),
    ) -> HttpResponse:
        """Sign and send one request.

        Args:
            method: HTTP verb
            bucket: Bucket name
            key: Object key
            headers: Extra request headers, signed together with the defaults
            data: Request body
            accept_statuses: Non-2xx statuses returned to the caller instead of raised

        Returns:
            The complete response

        Raises:
            TransportError: The request failed on the network or timed out
            ApiError: OSS answered with a status outside 2xx and ``accept_statuses``
        """
        request_headers = dict(headers or {})
        self._sign_request(method, bucket, key, request_headers)
        url = self._object_url(bucket, key)

        logger.debug(f"Sending {method} {url} ({len(data) if data is not None else 0} bytes)")
        start_time = time.time()

        try:
            response = await asyncio.wait_for(
                self.transport.request(method, url, request_headers, data),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout after {self.timeout}s on {method} {bucket}/{key}")
            raise TransportError(f"{method} {url} timed out after {self.timeout} seconds") from e
        except (aiohttp.ClientError, OSError) as e:
            logger.error(f"Transport error on {method} {bucket}/{key}: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e

        latency_ms = (time.time() - start_time) * 1000
        logger.debug(f"{method} {bucket}/{key} -> HTTP {response.status} in {latency_ms:.1f} ms")

        if response.ok or response.status in accept_statuses:
            return response

        error = make_api_error(response.status, response.text, method, url)
        logger.error(
            f"OSS error {error.code or 'Unknown'} (HTTP {response.status}) "
            f"for {method} {bucket}/{key}"
        )
        raise error
