"""
Object storage systems.
"""

from .oss import OSSClient

__all__ = ['OSSClient']
