"""
OSS request signing.

Everything in this module is a pure function of its arguments: no clock is
read and no I/O is performed, so signatures can be reproduced in tests.

Header authentication (https://help.aliyun.com/document_detail/31951.html)::

    Signature = base64(hmac-sha1(AccessKeySecret,
                VERB + "\\n"
                + Content-MD5 + "\\n"
                + Content-Type + "\\n"
                + Date + "\\n"
                + CanonicalizedOSSHeaders
                + CanonicalizedResource))
    Authorization: OSS AccessKeyId:Signature

Query-string authentication (https://help.aliyun.com/document_detail/31952.html)
signs the same string with the expiry time in place of the date.
"""

import base64
import hashlib
import hmac
from email.utils import formatdate
from typing import Mapping, Optional
from urllib.parse import quote

from configuration import AUTHORIZATION_PREFIX, OSS_HEADER_PREFIX
from common.errors import EncodingError


def format_http_date(timestamp: float) -> str:
    """Format a UNIX timestamp as an RFC 1123 date, e.g. ``Sun, 18 Oct 2026 08:00:00 GMT``."""
    return formatdate(timestamp, usegmt=True)


def content_md5(data: bytes) -> str:
    """Base64 encoded MD5 digest of the body, as sent in ``Content-MD5``."""
    return base64.b64encode(hashlib.md5(data).digest()).decode("ascii")


def _get_header(headers: Mapping[str, str], name: str) -> str:
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def canonicalize_oss_headers(headers: Optional[Mapping[str, str]]) -> str:
    """Build CanonicalizedOSSHeaders from the ``x-oss-*`` headers.

    Names are lower-cased, values stripped, entries sorted by name and each
    one terminated by a newline. Returns an empty string when no such header
    is present.
    """
    if not headers:
        return ""
    items = sorted(
        (key.lower(), str(value).strip())
        for key, value in headers.items()
        if key.lower().startswith(OSS_HEADER_PREFIX)
    )
    return "".join(f"{key}:{value}\n" for key, value in items)


def canonicalize_resource(bucket: str, key: str) -> str:
    """Build CanonicalizedResource: ``/bucket/key``, or ``/`` without a bucket."""
    if not bucket:
        return "/"
    return f"/{bucket}/{key}"


def string_to_sign(
    verb: str,
    content_md5: str,
    content_type: str,
    date: str,
    canonicalized_headers: str,
    canonicalized_resource: str,
) -> str:
    return "\n".join(
        [verb.upper(), content_md5 or "", content_type or "", date]
    ) + "\n" + canonicalized_headers + canonicalized_resource


def sign(access_key_secret: str, text: str) -> str:
    """Return base64(HMAC-SHA1(secret, text))."""
    try:
        key = access_key_secret.encode("utf-8")
        message = text.encode("utf-8")
    except (UnicodeEncodeError, AttributeError) as e:
        # The secret itself must never end up in the message
        raise EncodingError(f"Cannot encode signing input: {type(e).__name__}") from None
    digest = hmac.new(key, message, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def authorization_header(
    access_key_id: str,
    access_key_secret: str,
    verb: str,
    headers: Mapping[str, str],
    resource: str,
) -> str:
    """Compute the ``Authorization`` value for a request carrying ``headers``.

    ``Content-MD5``, ``Content-Type`` and ``Date`` are read from ``headers`` so
    the signature always matches what goes on the wire.
    """
    text = string_to_sign(
        verb,
        _get_header(headers, "Content-MD5"),
        _get_header(headers, "Content-Type"),
        _get_header(headers, "Date"),
        canonicalize_oss_headers(headers),
        resource,
    )
    return f"{AUTHORIZATION_PREFIX} {access_key_id}:{sign(access_key_secret, text)}"


def object_url(scheme: str, endpoint: str, bucket: str, key: str) -> str:
    """Virtual-hosted style URL: ``{scheme}://{bucket}.{endpoint}/{key}``."""
    return f"{scheme}://{bucket}.{endpoint}/{quote(key, safe='/')}"


def signed_url(
    verb: str,
    scheme: str,
    endpoint: str,
    bucket: str,
    key: str,
    access_key_id: str,
    access_key_secret: str,
    expires: int,
) -> str:
    """Build a pre-signed URL valid until the UNIX time ``expires``."""
    text = string_to_sign(verb, "", "", str(expires), "", canonicalize_resource(bucket, key))
    signature = sign(access_key_secret, text)
    return (
        f"{object_url(scheme, endpoint, bucket, key)}"
        f"?Expires={expires}"
        f"&OSSAccessKeyId={quote(access_key_id, safe='')}"
        f"&Signature={quote(signature, safe='')}"
    )
