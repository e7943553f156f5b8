"""
Configuration constants for the OSS client.

This module contains all configuration parameters including:
- Cloud credentials and endpoint
- Request defaults (timeouts, content type, signed URL lifetime)
- HTTP status codes used when mapping responses
"""

import os

# =============================================================================
# CLOUD STORAGE CONFIGURATION
# =============================================================================

# Alibaba Cloud OSS endpoint, e.g. "oss-cn-hangzhou.aliyuncs.com"
OSS_ENDPOINT: str = os.getenv("OSS_ENDPOINT", "")
OSS_ACCESS_KEY_ID: str = os.getenv("OSS_ACCESS_KEY_ID", "")
OSS_ACCESS_KEY_SECRET: str = os.getenv("OSS_ACCESS_KEY_SECRET", "")

# =============================================================================
# REQUEST DEFAULTS
# =============================================================================

# Deadline for a single request, including reading the response body
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("OSS_REQUEST_TIMEOUT_SECONDS", "120"))

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"
DEFAULT_SIGNED_URL_EXPIRE_SECONDS: int = 30

# =============================================================================
# SIGNATURE
# =============================================================================

AUTHORIZATION_PREFIX: str = "OSS"
OSS_HEADER_PREFIX: str = "x-oss-"

# =============================================================================
# HTTP STATUS CODES
# =============================================================================

HTTP_NOT_FOUND_STATUS: int = 404
HTTP_AUTH_ERROR_STATUSES: tuple = (401, 403)
