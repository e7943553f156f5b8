"""
Common building blocks for the OSS client.
"""

from .errors import OSSError, TransportError, ApiError, AuthError, EncodingError
from .transport import HttpTransport, HttpResponse, AiohttpTransport

__all__ = [
    'OSSError', 'TransportError', 'ApiError', 'AuthError', 'EncodingError',
    'HttpTransport', 'HttpResponse', 'AiohttpTransport',
]
