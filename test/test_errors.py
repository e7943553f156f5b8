"""
Tests for error mapping and OSS error body parsing.
"""

import os
import sys
import unittest

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import ApiError, AuthError, OSSError, make_api_error, parse_error_body


class TestErrorBody(unittest.TestCase):
    """Test parsing of OSS XML error documents."""

    def test_parse_error_document(self):
        """Child elements of <Error> are returned by tag."""
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            "<Error><Code>NoSuchBucket</Code><Message>The specified bucket does not exist.</Message>"
            "<RequestId>ABC</RequestId><HostId>b.oss-cn-hangzhou.aliyuncs.com</HostId>"
            "<BucketName>b</BucketName></Error>"
        )
        fields = parse_error_body(body)
        self.assertEqual(fields["Code"], "NoSuchBucket")
        self.assertEqual(fields["RequestId"], "ABC")
        self.assertEqual(fields["BucketName"], "b")

    def test_non_xml_body(self):
        """Plain text and empty bodies give no fields."""
        self.assertEqual(parse_error_body("Service Unavailable"), {})
        self.assertEqual(parse_error_body(""), {})
        self.assertEqual(parse_error_body("<Other/>"), {})


class TestMakeApiError(unittest.TestCase):
    """Test status to error type mapping."""

    def test_auth_statuses(self):
        """401 and 403 map to AuthError."""
        for status in (401, 403):
            error = make_api_error(status, "")
            self.assertIsInstance(error, AuthError)
            self.assertIsInstance(error, OSSError)

    def test_other_statuses(self):
        """Everything else maps to ApiError."""
        for status in (400, 404, 409, 500, 503):
            error = make_api_error(status, "")
            self.assertIs(type(error), ApiError)
            self.assertEqual(error.status, status)

    def test_message_keeps_plain_body(self):
        """A non-XML body appears verbatim in the message."""
        error = make_api_error(502, "Bad Gateway", "PUT", "https://b.example.com/k")
        self.assertEqual(str(error), "HTTP 502 for PUT https://b.example.com/k: Bad Gateway")
        self.assertIsNone(error.code)


if __name__ == '__main__':
    unittest.main()
