"""
Error types raised by the OSS client.
"""

import logging
from typing import Dict
import xml.etree.ElementTree as ElementTree

from configuration import HTTP_AUTH_ERROR_STATUSES

logger = logging.getLogger(__name__)


class OSSError(Exception):
    """Base class for every error raised by the OSS client."""


class TransportError(OSSError):
    """Network level failure: connection refused, reset, DNS failure or timeout."""


class EncodingError(OSSError):
    """A request could not be encoded or signed."""


class ApiError(OSSError):
    """OSS answered with a non-2xx status.

    ``body`` keeps the provider's response text verbatim. When the body is the
    usual OSS XML error document, its fields are exposed as ``code``,
    ``message``, ``request_id`` and ``host_id``.
    """

    def __init__(self, status: int, body: str = "", method: str = "", url: str = ""):
        self.status = status
        self.body = body
        self.method = method
        self.url = url

        fields = parse_error_body(body)
        self.code = fields.get("Code")
        self.message = fields.get("Message")
        self.request_id = fields.get("RequestId")
        self.host_id = fields.get("HostId")

        super().__init__(self._describe())

    def _describe(self) -> str:
        target = f"{self.method} {self.url}".strip()
        text = f"HTTP {self.status}"
        if target:
            text += f" for {target}"
        if self.code:
            text += f": {self.code}"
            if self.message:
                text += f" ({self.message})"
        elif self.body:
            text += f": {self.body}"
        return text


class AuthError(ApiError):
    """The request was rejected because of its signature or credentials (401/403)."""


def parse_error_body(body: str) -> Dict[str, str]:
    """Extract the child elements of an OSS ``<Error>`` document.

    Returns an empty dict for bodies that are empty or not XML.
    """
    if not body:
        return {}
    try:
        root = ElementTree.fromstring(body.encode("utf-8"))
    except (ElementTree.ParseError, UnicodeEncodeError):
        logger.debug("Error body is not XML, keeping it as plain text")
        return {}
    if root.tag != "Error":
        return {}
    return {child.tag: (child.text or "") for child in root}


def make_api_error(status: int, body: str, method: str = "", url: str = "") -> ApiError:
    """Build the error matching a non-2xx response status."""
    if status in HTTP_AUTH_ERROR_STATUSES:
        return AuthError(status, body, method, url)
    return ApiError(status, body, method, url)
