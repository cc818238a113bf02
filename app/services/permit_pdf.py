"""Render the official business permit as a single-page A4 PDF.

Rendering is pure templating: a fixed jurisdiction header, the grantee and business
details, and issue/expiry dates. Background and logo images are optional; when they
are missing or unreadable the permit is rendered with the text layout alone.
"""

import io
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

MARGIN = 72
LOGO_WIDTH = 80
TITLE_COLOR = HexColor("#002060")
FALLBACK_TEXT = "N/A"
CERTIFICATION_TEMPLATE = (
    "This certifies that the above-mentioned business is duly permitted to operate within "
    "the jurisdiction of the {municipality}, subject to all existing municipal ordinances."
)
DIGITAL_NOTE = (
    "Note: This business permit is digitally issued and does not require a physical signature."
)


@dataclass(frozen=True)
class PermitContent:
    """Everything printed on a permit."""

    application_id: int
    owner_name: str
    business_name: str
    business_type: str
    address: str
    issue_date: date
    expiry_date: date


def add_years(start: date, years: int) -> date:
    """Same calendar day `years` later; Feb 29 falls back to Feb 28 in non-leap years."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def format_permit_date(value: date) -> str:
    """Long date as printed on permits, e.g. 'October 18, 2026'."""
    return f"{value:%B} {value.day}, {value.year}"


def build_permit_content(
    application_id: int,
    owner_name: str | None,
    business_name: str | None,
    business_type: str | None,
    address: str | None,
    validity_years: int = 1,
    today: date | None = None,
) -> PermitContent:
    issue_date = today or date.today()
    return PermitContent(
        application_id=application_id,
        owner_name=owner_name or FALLBACK_TEXT,
        business_name=business_name or FALLBACK_TEXT,
        business_type=business_type or FALLBACK_TEXT,
        address=address or FALLBACK_TEXT,
        issue_date=issue_date,
        expiry_date=add_years(issue_date, validity_years),
    )


def _draw_optional_image(
    pdf: canvas.Canvas,
    path: Path | None,
    x: float,
    y: float,
    width: float,
    height: float | None = None,
) -> bool:
    """Draw an image if the file exists and is readable. Returns True if drawn."""
    if path is None or not path.is_file():
        return False
    try:
        image = ImageReader(str(path))
        if height is None:
            img_w, img_h = image.getSize()
            height = width * img_h / img_w if img_w else width
            y -= height
        pdf.drawImage(image, x, y, width=width, height=height, mask="auto")
        return True
    except OSError as e:
        logger.warning(
            "Permit asset unreadable; rendering without it",
            extra={"asset": str(path), "reason": str(e)[:200]},
        )
        return False


def _resolve_asset(assets_dir: Path | None, name: str | None) -> Path | None:
    if not name:
        return None
    path = Path(name)
    if not path.is_absolute() and assets_dir is not None:
        path = assets_dir / path
    return path


def render_permit_pdf(
    permit: PermitContent,
    settings: "Settings",
    assets_dir: Path | None = None,
) -> bytes:
    """Render the permit and return the PDF bytes."""
    buffer = io.BytesIO()
    width, height = A4
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f"Business Permit {permit.application_id}")

    _draw_optional_image(
        pdf,
        _resolve_asset(assets_dir, settings.PERMIT_BACKGROUND_PATH),
        0,
        0,
        width,
        height,
    )
    _draw_optional_image(
        pdf,
        _resolve_asset(assets_dir, settings.PERMIT_LOGO_PATH),
        MARGIN,
        height - MARGIN,
        LOGO_WIDTH,
    )

    center = width / 2
    y = height - MARGIN - 10

    pdf.setFillColor(black)
    pdf.setFont("Helvetica", 14)
    for line in settings.PERMIT_JURISDICTION_LINES:
        pdf.drawCentredString(center, y, line)
        y -= 18
    y -= 8
    pdf.setFont("Helvetica", 16)
    pdf.drawCentredString(center, y, settings.PERMIT_OFFICE)
    y -= 40

    pdf.setFillColor(TITLE_COLOR)
    pdf.setFont("Helvetica-Bold", 22)
    pdf.drawCentredString(center, y, f"BUSINESS PERMIT {permit.issue_date.year}")
    y -= 50

    pdf.setFillColor(black)
    pdf.setFont("Helvetica", 12)
    pdf.drawString(MARGIN, y, "TO WHOM IT MAY CONCERN:")
    y -= 28
    pdf.drawString(MARGIN, y, "This permit is granted to:")
    y -= 22
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawCentredString(center, y, permit.owner_name)
    y -= 26

    pdf.setFont("Helvetica", 12)
    for line in (
        f"Business Name: {permit.business_name}",
        f"Business Type: {permit.business_type}",
        f"Address: {permit.address}",
    ):
        pdf.drawCentredString(center, y, line)
        y -= 18
    y -= 24

    text_width = width - 2 * MARGIN
    certification = CERTIFICATION_TEMPLATE.format(municipality=settings.PERMIT_MUNICIPALITY)
    for line in simpleSplit(certification, "Helvetica", 12, text_width):
        pdf.drawString(MARGIN, y, line)
        y -= 16
    y -= 28

    pdf.drawString(MARGIN, y, f"Issued on: {format_permit_date(permit.issue_date)}")
    y -= 18
    pdf.drawString(MARGIN, y, f"Valid until: {format_permit_date(permit.expiry_date)}")
    y -= 54

    pdf.setFont("Helvetica-Oblique", 10)
    for line in simpleSplit(DIGITAL_NOTE, "Helvetica-Oblique", 10, text_width):
        pdf.drawCentredString(center, y, line)
        y -= 14

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
