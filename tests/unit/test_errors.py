"""
Unit tests for error envelopes.
"""

import json

from proxyhandler import errors
from proxyhandler.errors import ConfigurationError, MISCONFIGURED_MESSAGE


def raised(error: Exception) -> Exception:
    """Helper returning ``error`` with a traceback attached."""
    try:
        raise error
    except Exception as e:
        return e


class TestServerErrors:
    """Tests for the 500 envelopes."""

    def test_server_error(self):
        response = errors.server_error(raised(ValueError("bad value")))

        assert response.status_code == 500
        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        body = json.loads(response.body)
        assert body["message"] == "bad value"
        assert body["cause"].startswith("Traceback")
        assert "ValueError: bad value" in body["cause"]

    def test_server_error_with_base_message(self):
        response = errors.server_error(ValueError("detail"), "Base")
        assert json.loads(response.body)["message"] == "Base\ndetail"

    def test_configuration_error(self):
        """Test the fixed message and that the cause is reported."""
        error = ConfigurationError(raised(KeyError("REGION")))

        response = errors.configuration_error(error)

        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["message"] == (
            "This service is mis-configured. Please contact your system administrator.\n"
            "\n'REGION'"
        )
        assert "KeyError" in body["cause"]

    def test_configuration_error_keeps_cause(self):
        cause = RuntimeError("x")
        error = ConfigurationError(cause)
        assert error.__cause__ is cause
        assert str(error) == MISCONFIGURED_MESSAGE
        assert error.status_code == 500

    def test_parse_failure(self):
        response = errors.parse_failure({"headers": None})

        assert response.status_code == 500
        assert response.body == "Failed to parse: {'headers': None}"
        assert "Content-Type" not in response.headers


class TestRejections:
    """Tests for the plain-text rejections."""

    def test_unsupported_method(self):
        response = errors.unsupported_method("patch")
        assert response.status_code == 400
        assert response.body == "Lambda cannot handle the method patch"

    def test_missing_header(self):
        response = errors.missing_header("accept")
        assert response.status_code == 415
        assert response.body == "No accept header"

    def test_malformed_media_type(self):
        response = errors.malformed_media_type("Could not parse 'x'")
        assert response.status_code == 400
        assert response.body == "Malformed media type. Could not parse 'x'"

    def test_cors_missing_header(self):
        response = errors.cors_missing_header("origin")
        assert response.status_code == 400
        assert response.body == "Options method should include the origin header"

    def test_cors_headers_not_present(self):
        response = errors.cors_headers_not_present(["x-bar", "x-foo"])
        assert response.status_code == 400
        assert response.body == "The required header(s) not present: x-bar, x-foo"
