"""PDF export of final letter text using ReportLab."""

import logging
import re
from datetime import date
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from letterdesk.app.models.common import ErrorCode, Result

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_PREFIX = "immigration_letter"
TITLE = "Letter of Explanation"


def pdf_filename(
    display_name: str | None,
    on: date | None = None,
    prefix: str = DEFAULT_FILENAME_PREFIX,
) -> str:
    """Build the download filename: ``<prefix>_<sanitized-name>_<YYYY-MM-DD>.pdf``.

    Every non-alphanumeric character becomes an underscore and the name is
    lower-cased; a missing name becomes ``applicant``.
    """
    sanitized = re.sub(r"[^a-zA-Z0-9]", "_", display_name or "").lower() or "applicant"
    day = (on or date.today()).isoformat()
    return f"{prefix}_{sanitized}_{day}.pdf"


def _build_styles() -> dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "LetterTitle",
            parent=styles["h1"],
            fontSize=14,
            alignment=TA_CENTER,
            spaceAfter=6,
            textColor=colors.HexColor("#1a237e"),
        ),
        "subtitle": ParagraphStyle(
            "LetterSubtitle",
            parent=styles["h2"],
            fontSize=10,
            alignment=TA_CENTER,
            spaceAfter=20,
            textColor=colors.darkgrey,
        ),
        "body": ParagraphStyle(
            "LetterBody",
            parent=styles["Normal"],
            fontName="Times-Roman",
            fontSize=11,
            alignment=TA_LEFT,
            leading=16,
            spaceBefore=4,
            spaceAfter=8,
        ),
    }


def _add_page_number(canvas, doc) -> None:  # type: ignore[no-untyped-def]
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawCentredString(letter[0] / 2.0, 30, f"Page {canvas.getPageNumber()}")
    canvas.restoreState()


def render_letter_pdf(text: str, display_name: str | None = None) -> bytes:
    """Render letter text to PDF bytes.

    Each non-blank line becomes one paragraph; text is escaped so that
    characters like ``&`` or ``<`` in the letter never break ReportLab markup.

    Args:
        text: Final (possibly user-edited) letter text
        display_name: Applicant name shown under the title

    Returns:
        PDF document as bytes
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        rightMargin=72,
        leftMargin=72,
        topMargin=72,
        bottomMargin=54,
        title=TITLE,
    )
    styles = _build_styles()

    content = [Paragraph(TITLE.upper(), styles["title"])]
    if display_name:
        content.append(Paragraph(escape(display_name), styles["subtitle"]))
    content.append(Spacer(1, 12))

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        content.append(Paragraph(escape(stripped), styles["body"]))

    doc.build(content, onFirstPage=_add_page_number, onLaterPages=_add_page_number)
    return buffer.getvalue()


def export_letter_pdf(text: str, display_name: str | None = None) -> Result[bytes]:
    """Render a letter to PDF, converting render failures into a Result."""
    try:
        pdf_bytes = render_letter_pdf(text, display_name)
    except Exception as e:
        logger.exception("PDF generation failed")
        return Result.failure(ErrorCode.PDF_GENERATION_ERROR, f"Failed to generate PDF: {e}")

    logger.info(f"PDF generated ({len(pdf_bytes)} bytes, {len(text.split())} words)")
    return Result.success(pdf_bytes)
