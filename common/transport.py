"""
HTTP transport used by the storage systems.

The client only depends on ``HttpTransport``; tests substitute their own
implementation instead of talking to the network.
"""

import logging
from typing import Mapping, Optional

import aiohttp
from yarl import URL

logger = logging.getLogger(__name__)


class HttpResponse:
    """Status, headers and fully read body of an HTTP response."""

    def __init__(self, status: int, headers: Optional[Mapping[str, str]] = None, body: bytes = b""):
        self.status = status
        self.headers = dict(headers or {})
        self.body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def __repr__(self):
        return f"HttpResponse(status={self.status}, body={len(self.body)} bytes)"


class HttpTransport:
    """Capability to send one HTTP request and return the complete response.

    Implementations may hold a connection pool; ``__aenter__``/``__aexit__``
    open and release it. Network failures are raised as the implementation's
    own exceptions (``aiohttp.ClientError``, ``OSError``, ...) and mapped to
    ``TransportError`` by the caller.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: Optional[bytes] = None,
    ) -> HttpResponse:
        raise NotImplementedError


class AiohttpTransport(HttpTransport):
    """``HttpTransport`` backed by an ``aiohttp.ClientSession``.

    Used as an async context manager the session (and its connection pool) is
    shared by every request made inside the block. Outside of a block each
    request opens and closes its own session.
    """

    def __init__(self, connector_limit: int = 100):
        self.connector_limit = connector_limit
        self._session: Optional[aiohttp.ClientSession] = None

    def _create_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=self.connector_limit),
            # Deadlines are enforced by the caller
            timeout=aiohttp.ClientTimeout(total=None),
            # Objects are returned as stored, whatever their Content-Encoding
            auto_decompress=False,
        )

    async def __aenter__(self):
        if self._session is None:
            self._session = self._create_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: Optional[bytes] = None,
    ) -> HttpResponse:
        if self._session is not None:
            return await self._send(self._session, method, url, headers, data)

        async with self._create_session() as session:
            return await self._send(session, method, url, headers, data)

    async def _send(self, session, method, url, headers, data) -> HttpResponse:
        # The key is already percent-encoded; dot segments must reach the server untouched
        target = URL(url, encoded=True)
        async with session.request(method, target, headers=dict(headers), data=data) as response:
            body = await response.read()
            logger.debug(f"{method} {url} -> HTTP {response.status} ({len(body)} bytes)")
            return HttpResponse(response.status, response.headers, body)
