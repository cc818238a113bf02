"""Unit tests for app.core.config.Settings validation."""

import unittest

from pydantic import ValidationError

from app.core.config import Settings


class TestSettingsValidation(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        settings = Settings()
        self.assertEqual(settings.PERMIT_VALIDITY_YEARS, 1)
        self.assertEqual(settings.STRIPE_CURRENCY, "php")

    def test_rejects_unsupported_database(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://root@localhost/permits")

    def test_accepts_postgres(self) -> None:
        settings = Settings(DATABASE_URL="postgresql://app:pw@db:5432/permits")
        self.assertTrue(settings.DATABASE_URL.startswith("postgresql://"))

    def test_normalizes_currency_and_log_level(self) -> None:
        settings = Settings(STRIPE_CURRENCY=" PHP ", LOG_LEVEL="debug")
        self.assertEqual(settings.STRIPE_CURRENCY, "php")
        self.assertEqual(settings.LOG_LEVEL, "DEBUG")

    def test_bounded_values(self) -> None:
        for field, value in (
            ("PERMIT_VALIDITY_YEARS", 0),
            ("STRIPE_REQUEST_TIMEOUT_SEC", 0),
            ("JWT_EXPIRE_MINUTES", 0),
            ("UPLOADS_URL_PREFIX", "uploads"),
            ("STRIPE_API_BASE", "ftp://stripe"),
        ):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    Settings(**{field: value})


if __name__ == "__main__":
    unittest.main()
