"""
Alibaba Cloud OSS object storage system implementation.
"""

import asyncio
import logging
import os
from typing import BinaryIO, Optional, Union

from configuration import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_SIGNED_URL_EXPIRE_SECONDS,
    HTTP_NOT_FOUND_STATUS,
)
from common import signing
from common.errors import EncodingError
from systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)

OSS_VERB_GET = "GET"
OSS_VERB_PUT = "PUT"
OSS_VERB_DELETE = "DELETE"


class OSSClient(ObjectStorageSystem):
    """Alibaba Cloud OSS client.

    Requests are authenticated with the OSS header signature
    (``Authorization: OSS AccessKeyId:Signature``) and sent to the
    virtual-hosted URL ``https://{bucket}.{endpoint}/{key}``.

    >>> client = OSSClient("oss-cn-hangzhou.aliyuncs.com", "AKID", "SECRET")
    >>> await client.put_file_content("mybucket", "helloworld.txt", "hello world!")

    Use ``async with client:`` to share one connection pool between calls.
    """

    def _object_url(self, bucket: str, key: str) -> str:
        return signing.object_url(self.scheme, self.endpoint, bucket, key)

    def _sign_request(self, method: str, bucket: str, key: str, headers: dict) -> None:
        headers["Date"] = signing.format_http_date(self.clock())
        headers["Authorization"] = signing.authorization_header(
            self.access_key_id,
            self.access_key_secret,
            method,
            headers,
            signing.canonicalize_resource(bucket, key),
        )

    @staticmethod
    def _to_bytes(content) -> bytes:
        if isinstance(content, str):
            try:
                return content.encode("utf-8")
            except UnicodeEncodeError as e:
                raise EncodingError(f"Content is not valid UTF-8 text: {e.reason}") from e
        if isinstance(content, (bytes, bytearray, memoryview)):
            return bytes(content)
        raise EncodingError(f"Unsupported content type: {type(content).__name__}")

    # =========================================================================
    # Upload
    # =========================================================================

    async def put_file_content(
        self,
        bucket_name: str,
        key: str,
        content: Union[str, bytes],
        content_type: Optional[str] = None,
    ) -> None:
        """Upload ``content`` as the object ``key``.

        Args:
            bucket_name: Bucket name
            key: Object key
            content: Text (sent UTF-8 encoded) or bytes
            content_type: Content-Type of the object (default application/octet-stream)

        Raises:
            TransportError: Network failure or timeout
            AuthError: Signature or credentials rejected (401/403)
            ApiError: Any other non-2xx answer
            EncodingError: Content or secret could not be encoded
        """
        await self.put_file_content_bytes(bucket_name, key, self._to_bytes(content), content_type)

    async def put_file_content_bytes(
        self,
        bucket_name: str,
        key: str,
        content_bytes: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """Upload raw bytes as the object ``key``."""
        content_bytes = self._to_bytes(content_bytes)
        headers = {
            "Content-MD5": signing.content_md5(content_bytes),
            "Content-Type": content_type or DEFAULT_CONTENT_TYPE,
        }
        await self._request(OSS_VERB_PUT, bucket_name, key, headers=headers, data=content_bytes)
        logger.info(f"Uploaded {bucket_name}/{key} ({len(content_bytes)} bytes)")

    @staticmethod
    def _read_file(path) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    async def put_file(
        self,
        bucket_name: str,
        key: str,
        file: Union[str, os.PathLike, BinaryIO],
        content_type: Optional[str] = None,
    ) -> None:
        """Upload a local file.

        The whole file is read into memory, in a worker thread, before it is
        sent. ``file`` is a path or a file object opened in binary mode.
        """
        if isinstance(file, (str, os.PathLike)):
            data = await asyncio.to_thread(self._read_file, file)
        else:
            data = await asyncio.to_thread(file.read)
        await self.put_file_content_bytes(bucket_name, key, data, content_type)

    # =========================================================================
    # Download / delete
    # =========================================================================

    async def get_file_content_bytes(self, bucket_name: str, key: str) -> Optional[bytes]:
        """Download an object. Returns None when it does not exist."""
        response = await self._request(
            OSS_VERB_GET, bucket_name, key, accept_statuses=(HTTP_NOT_FOUND_STATUS,)
        )
        if response.status == HTTP_NOT_FOUND_STATUS:
            logger.debug(f"Object {bucket_name}/{key} not found")
            return None
        return response.body

    async def get_file_content(self, bucket_name: str, key: str) -> Optional[str]:
        """Download an object as text. Returns None when it does not exist."""
        content = await self.get_file_content_bytes(bucket_name, key)
        if content is None:
            return None
        return content.decode("utf-8", errors="replace")

    async def delete_file(self, bucket_name: str, key: str) -> None:
        """Delete an object. OSS reports success (204) for missing objects too."""
        await self._request(OSS_VERB_DELETE, bucket_name, key)
        logger.info(f"Deleted {bucket_name}/{key}")

    # =========================================================================
    # Pre-signed URLs
    # =========================================================================

    def generate_signed_url(
        self,
        verb: str,
        bucket_name: str,
        key: str,
        expire_in_seconds: int = DEFAULT_SIGNED_URL_EXPIRE_SECONDS,
        is_https: bool = True,
    ) -> str:
        """Build a URL carrying its own signature, valid for ``expire_in_seconds``."""
        expires = int(self.clock()) + expire_in_seconds
        return signing.signed_url(
            verb,
            "https" if is_https else "http",
            self.endpoint,
            bucket_name,
            key,
            self.access_key_id,
            self.access_key_secret,
            expires,
        )

    def generate_signed_put_url(
        self, bucket_name: str, key: str, expire_in_seconds: int = DEFAULT_SIGNED_URL_EXPIRE_SECONDS
    ) -> str:
        return self.generate_signed_url(OSS_VERB_PUT, bucket_name, key, expire_in_seconds)

    def generate_signed_get_url(
        self, bucket_name: str, key: str, expire_in_seconds: int = DEFAULT_SIGNED_URL_EXPIRE_SECONDS
    ) -> str:
        return self.generate_signed_url(OSS_VERB_GET, bucket_name, key, expire_in_seconds)

    def generate_signed_delete_url(
        self, bucket_name: str, key: str, expire_in_seconds: int = DEFAULT_SIGNED_URL_EXPIRE_SECONDS
    ) -> str:
        return self.generate_signed_url(OSS_VERB_DELETE, bucket_name, key, expire_in_seconds)
