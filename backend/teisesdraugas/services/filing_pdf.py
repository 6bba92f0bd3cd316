# teisesdraugas/services/filing_pdf.py
"""
PDF rendering of a stored court filing.

The plain-text filing is re-flowed onto A4 pages with greedy word wrapping
by measured string width.
"""
import io
import os
from datetime import datetime

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import CourtFiling, FilingType
from teisesdraugas.utils.helpers import format_date_lt

PAGE_SIZE = (595.28, 841.89)  # A4 in points
MARGIN = 50
LINE_HEIGHT = 14
BODY_SIZE = 11
FOOTER_SIZE = 9

FILING_TITLES = {
    FilingType.PAYMENT_ORDER: "PRAŠYMAS IŠDUOTI TEISMO ĮSAKYMĄ",
    FilingType.SMALL_CLAIM: "IEŠKINYS (SUPAPRASTINTAS PROCESAS)",
    FilingType.REGULAR_CLAIM: "IEŠKINYS",
}


class FilingPdfRenderer:

    def __init__(self, config: Settings):
        self.platform_name = config.PLATFORM_NAME
        self.font = "Helvetica"
        self.bold_font = "Helvetica-Bold"

        # Standard Type 1 fonts lack some Lithuanian glyphs
        font_path = config.PDF_FONT_PATH
        if font_path and os.path.exists(font_path):
            pdfmetrics.registerFont(TTFont("FilingFont", font_path))
            self.font = self.bold_font = "FilingFont"
        elif font_path:
            logger.warning(f"PDF_FONT_PATH {font_path} not found, using Helvetica")

    def render(self, filing: CourtFiling, generated_on=None) -> bytes:
        generated_on = generated_on or datetime.utcnow().date()
        buffer = io.BytesIO()
        footer = [
            f"Dokumentas sugeneruotas {self.platform_name} platforma",
            f"Data: {format_date_lt(generated_on)}",
        ]
        writer = _PageWriter(canvas.Canvas(buffer, pagesize=PAGE_SIZE), self, footer)

        writer.write(FILING_TITLES.get(filing.filing_type, FILING_TITLES[FilingType.PAYMENT_ORDER]), bold=True, size=14)
        writer.skip(LINE_HEIGHT)
        writer.write(filing.court_name or "Apylinkės teismas", bold=True, size=12)
        writer.skip(LINE_HEIGHT * 2)

        for line in (filing.content or "").split("\n"):
            if line.strip():
                writer.write(line.strip())
            else:
                writer.skip(LINE_HEIGHT / 2)

        writer.finish()
        return buffer.getvalue()


class _PageWriter:
    """Cursor over a reportlab canvas that starts new pages as it fills up"""

    def __init__(self, pdf: canvas.Canvas, renderer: FilingPdfRenderer, first_page_footer):
        self.pdf = pdf
        self.renderer = renderer
        self.first_page_footer = first_page_footer
        self.width, self.height = PAGE_SIZE
        self.max_width = self.width - 2 * MARGIN
        self.y = self.height - MARGIN
        self.page_number = 1

    def _font(self, bold: bool) -> str:
        return self.renderer.bold_font if bold else self.renderer.font

    def _end_page(self):
        if self.page_number == 1:
            self._draw_footer()
        self.pdf.showPage()

    def _ensure_room(self):
        if self.y < MARGIN:
            self._end_page()
            self.page_number += 1
            self.y = self.height - MARGIN

    def _draw_line(self, text: str, font: str, size: float):
        self._ensure_room()
        self.pdf.setFont(font, size)
        self.pdf.drawString(MARGIN, self.y, text)
        self.y -= LINE_HEIGHT

    def _break_word(self, word: str, font: str, size: float):
        """Split a token wider than the text column into pieces that fit"""
        if pdfmetrics.stringWidth(word, font, size) <= self.max_width:
            return [word]
        pieces = []
        piece = ""
        for char in word:
            if piece and pdfmetrics.stringWidth(piece + char, font, size) > self.max_width:
                pieces.append(piece)
                piece = char
            else:
                piece += char
        if piece:
            pieces.append(piece)
        return pieces

    def write(self, text: str, bold: bool = False, size: float = BODY_SIZE):
        font = self._font(bold)
        line = ""
        words = [piece for word in text.split(" ") for piece in self._break_word(word, font, size)]
        for word in words:
            candidate = f"{line} {word}" if line else word
            if line and pdfmetrics.stringWidth(candidate, font, size) > self.max_width:
                self._draw_line(line, font, size)
                line = word
            else:
                line = candidate
        if line:
            self._draw_line(line, font, size)

    def skip(self, amount: float):
        self.y -= amount

    def _draw_footer(self):
        # Below the bottom margin, so body text never overlaps it
        y = MARGIN - 20
        self.pdf.setFont(self.renderer.font, FOOTER_SIZE)
        for text in self.first_page_footer:
            self.pdf.drawString(MARGIN, y, text)
            y -= FOOTER_SIZE + 2

    def finish(self):
        self._end_page()
        self.pdf.save()
