"""
Tests for the storage factory.
"""

import os
import sys
import unittest
from unittest.mock import Mock, patch

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.storage_factory import create_oss_client
from systems.oss import OSSClient


class TestCreateOSSClient(unittest.TestCase):
    """Test client creation from arguments and configuration."""

    def test_explicit_arguments(self):
        """Arguments take precedence over configuration."""
        transport = Mock()
        client = create_oss_client(
            "oss-cn-hangzhou.aliyuncs.com", "AKID", "SECRET", transport=transport, timeout=3
        )
        self.assertIsInstance(client, OSSClient)
        self.assertEqual(client.endpoint, "oss-cn-hangzhou.aliyuncs.com")
        self.assertIs(client.transport, transport)
        self.assertEqual(client.timeout, 3)

    def test_values_from_configuration(self):
        """Missing arguments are read from configuration."""
        with patch('common.storage_factory.OSS_ENDPOINT', 'oss-cn-beijing.aliyuncs.com'), \
             patch('common.storage_factory.OSS_ACCESS_KEY_ID', 'ENV_ID'), \
             patch('common.storage_factory.OSS_ACCESS_KEY_SECRET', 'ENV_SECRET'):
            client = create_oss_client()
        self.assertEqual(client.endpoint, 'oss-cn-beijing.aliyuncs.com')
        self.assertEqual(client.access_key_id, 'ENV_ID')
        self.assertEqual(client.access_key_secret, 'ENV_SECRET')

    def test_missing_credentials(self):
        """Empty endpoint or credentials are rejected."""
        with patch('common.storage_factory.OSS_ENDPOINT', ''), \
             patch('common.storage_factory.OSS_ACCESS_KEY_ID', ''), \
             patch('common.storage_factory.OSS_ACCESS_KEY_SECRET', ''):
            with self.assertRaises(ValueError):
                create_oss_client()
            with self.assertRaises(ValueError):
                create_oss_client("oss-cn-hangzhou.aliyuncs.com", "AKID")


if __name__ == '__main__':
    unittest.main()
