from __future__ import annotations

import logging
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Iterable, List

from pypdf import PdfReader, PdfWriter
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

log = logging.getLogger("cwl-app")

TITLE_SIZE = 16
BODY_SIZE = 12
MARGIN = 50
LINE_HEIGHT = 15

# Built-in Type 1 fonts only cover WinAnsi; player names need a Unicode TTF.
FALLBACK_FONTS = ("Helvetica", "Helvetica-Bold")
FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/Library/Fonts/DejaVuSans.ttf",
    "C:/Windows/Fonts/DejaVuSans.ttf",
    "C:/Windows/Fonts/arialuni.ttf",
)


def find_unicode_font(configured: str = "") -> str | None:
    """Return the configured TTF path, else the first known system font found."""
    candidates = (configured,) if configured else FONT_CANDIDATES
    for candidate in candidates:
        if candidate and Path(candidate).is_file():
            return candidate
    return None


@lru_cache(maxsize=None)
def _register_font(path: str) -> tuple[str, str]:
    name = f"CWLBody-{Path(path).stem}"
    pdfmetrics.registerFont(TTFont(name, path))
    return name, name


def resolve_fonts(font_path: str = "") -> tuple[str, str]:
    """(body, title) font names; falls back to Helvetica when no TTF is available."""
    path = find_unicode_font(font_path)
    if path is None:
        log.warning("No Unicode TTF font found; names outside Latin-1 will not render in PDFs")
        return FALLBACK_FONTS
    return _register_font(path)


def _wrap_lines(message: str, width: float, font: str) -> List[str]:
    """Split the message into lines that fit the page; blank lines are kept."""
    wrapped: List[str] = []
    for raw_line in message.splitlines():
        if not raw_line.strip():
            wrapped.append("")
            continue
        wrapped.extend(simpleSplit(raw_line, font, BODY_SIZE, width) or [""])
    return wrapped


def _draw(lines: Iterable[str], title: str, body_font: str, title_font: str) -> bytes:
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(title)
    width, height = A4

    y = height - MARGIN
    c.setFont(title_font, TITLE_SIZE)
    c.drawCentredString(width / 2, y, title)
    y -= LINE_HEIGHT * 2
    c.setFont(body_font, BODY_SIZE)

    for line in lines:
        if y < MARGIN:
            c.showPage()
            c.setFont(body_font, BODY_SIZE)
            y = height - MARGIN
        c.drawString(MARGIN, y, line)
        y -= LINE_HEIGHT

    c.showPage()
    c.save()
    return buffer.getvalue()


def render_message_pdf(message: str, title: str = "Messaggio CWL", font_path: str = "") -> bytes:
    body_font, title_font = resolve_fonts(font_path)
    width, _ = A4
    raw_pdf = _draw(_wrap_lines(message, width - 2 * MARGIN, body_font), title, body_font, title_font)

    reader = PdfReader(BytesIO(raw_pdf))
    writer = PdfWriter()
    writer.clone_document_from_reader(reader)
    writer.add_metadata({"/Title": title, "/Subject": "CWL roster", "/Producer": "cwl-roster"})

    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
