"""Unit tests for app.services.permit_pdf: dates, fallbacks and rendering without assets."""

import tempfile
import unittest
from datetime import date
from pathlib import Path

from app.core.config import get_settings
from app.services.permit_pdf import (
    FALLBACK_TEXT,
    add_years,
    build_permit_content,
    format_permit_date,
    render_permit_pdf,
)


class TestDates(unittest.TestCase):
    def test_expiry_is_one_year_after_issue(self) -> None:
        permit = build_permit_content(1, "A", "B", "C", "D", today=date(2026, 10, 18))
        self.assertEqual(permit.issue_date, date(2026, 10, 18))
        self.assertEqual(permit.expiry_date, date(2027, 10, 18))

    def test_leap_day_falls_back_to_feb_28(self) -> None:
        self.assertEqual(add_years(date(2028, 2, 29), 1), date(2029, 2, 28))
        self.assertEqual(add_years(date(2028, 2, 29), 4), date(2032, 2, 29))

    def test_long_date_format(self) -> None:
        self.assertEqual(format_permit_date(date(2026, 3, 5)), "March 5, 2026")


class TestBuildPermitContent(unittest.TestCase):
    def test_missing_fields_use_fallback(self) -> None:
        permit = build_permit_content(3, None, "Shop", "", None, today=date(2026, 1, 1))
        self.assertEqual(permit.owner_name, FALLBACK_TEXT)
        self.assertEqual(permit.business_type, FALLBACK_TEXT)
        self.assertEqual(permit.address, FALLBACK_TEXT)
        self.assertEqual(permit.business_name, "Shop")

    def test_validity_years(self) -> None:
        permit = build_permit_content(
            3, "A", "B", "C", "D", validity_years=3, today=date(2026, 1, 1)
        )
        self.assertEqual(permit.expiry_date, date(2029, 1, 1))


class TestRenderPermitPdf(unittest.TestCase):
    def test_renders_without_background_or_logo(self) -> None:
        permit = build_permit_content(
            9, "Juan Dela Cruz", "Carinderia", "Food", "Poblacion", today=date(2026, 10, 18)
        )
        with tempfile.TemporaryDirectory() as tmp:
            pdf = render_permit_pdf(permit, get_settings(), assets_dir=Path(tmp))
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertGreater(len(pdf), 500)

    def test_unreadable_asset_is_skipped(self) -> None:
        permit = build_permit_content(9, "A", "B", "C", "D", today=date(2026, 10, 18))
        settings = get_settings()
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / settings.PERMIT_LOGO_PATH).write_bytes(b"not an image")
            with self.assertLogs("app.services.permit_pdf", level="WARNING"):
                pdf = render_permit_pdf(permit, settings, assets_dir=Path(tmp))
        self.assertTrue(pdf.startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
