"""Unit tests for app.api.v1.errors.to_http_exception."""

import unittest

from app.api.v1.errors import to_http_exception
from app.services.accounts import InvalidCredentialsError
from app.services.errors import (
    InvalidTransitionError,
    NotFoundError,
    PaymentProcessorError,
    PaymentProcessorNotConfiguredError,
    PermissionDeniedError,
    PermitRenderError,
    PreconditionError,
)


class TestToHttpException(unittest.TestCase):
    def test_status_codes(self) -> None:
        cases = (
            (NotFoundError("Application not found"), 404),
            (PermissionDeniedError("Unauthorized"), 403),
            (InvalidCredentialsError("Invalid credentials"), 403),
            (PreconditionError("Remarks are required"), 400),
            (InvalidTransitionError("Cannot pay", "pending", "pay"), 400),
            (PaymentProcessorNotConfiguredError("not configured"), 503),
            (PaymentProcessorError("declined", 402), 400),
            (PaymentProcessorError("bad key", 401), 502),
            (PaymentProcessorError("unreachable"), 502),
            (PermitRenderError("render failed"), 500),
        )
        for error, expected in cases:
            with self.subTest(error=type(error).__name__, expected=expected):
                exc = to_http_exception(error)
                self.assertEqual(exc.status_code, expected)
                self.assertEqual(exc.detail, error.message)


if __name__ == "__main__":
    unittest.main()
