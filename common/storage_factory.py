"""
Factory module for creating storage system instances.
"""

import logging
from typing import Optional

from systems.oss import OSSClient
from common.transport import HttpTransport
from configuration import (
    OSS_ENDPOINT,
    OSS_ACCESS_KEY_ID,
    OSS_ACCESS_KEY_SECRET,
    REQUEST_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


def create_oss_client(
    endpoint: Optional[str] = None,
    access_key_id: Optional[str] = None,
    access_key_secret: Optional[str] = None,
    transport: Optional[HttpTransport] = None,
    timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
) -> OSSClient:
    """Create an OSS client, filling missing arguments from the environment.

    Args:
        endpoint: OSS endpoint (default: OSS_ENDPOINT)
        access_key_id: Access key id (default: OSS_ACCESS_KEY_ID)
        access_key_secret: Access key secret (default: OSS_ACCESS_KEY_SECRET)
        transport: HTTP transport to use instead of aiohttp
        timeout: Per-request deadline in seconds, None to wait forever

    Returns:
        OSSClient instance

    Raises:
        ValueError: If endpoint, access key id or access key secret is empty
    """
    endpoint = endpoint or OSS_ENDPOINT
    access_key_id = access_key_id or OSS_ACCESS_KEY_ID
    access_key_secret = access_key_secret or OSS_ACCESS_KEY_SECRET

    if not endpoint or not access_key_id or not access_key_secret:
        raise ValueError(
            "Endpoint, access_key_id or access_key_secret cannot be empty. "
            "Set OSS_ENDPOINT, OSS_ACCESS_KEY_ID and OSS_ACCESS_KEY_SECRET."
        )

    return OSSClient(
        endpoint,
        access_key_id,
        access_key_secret,
        transport=transport,
        timeout=timeout,
    )
