from io import BytesIO

import pytest
from pypdf import PdfReader

from cwl_app.pdf.message import FALLBACK_FONTS, find_unicode_font, render_message_pdf, resolve_fonts

MESSAGE = "Gold League\n\nEclipse 2 partecipanti\n\n1) Ann th12\n2) Cy th9\n\n---\n\n"


def test_render_message_pdf_contains_roster_text():
    pdf_bytes = render_message_pdf(MESSAGE)
    assert pdf_bytes.startswith(b"%PDF")

    reader = PdfReader(BytesIO(pdf_bytes))
    text = reader.pages[0].extract_text()
    assert "Messaggio CWL" in text
    assert "Eclipse 2 partecipanti" in text
    assert "Ann th12" in text
    assert reader.metadata.title == "Messaggio CWL"


def test_render_message_pdf_breaks_long_messages_across_pages():
    message = "".join(f"{i}) Player{i} th15\n" for i in range(1, 121))
    reader = PdfReader(BytesIO(render_message_pdf(message)))
    assert len(reader.pages) > 1
    assert "120) Player120 th15" in reader.pages[-1].extract_text()


def test_render_message_pdf_wraps_wide_lines():
    reader = PdfReader(BytesIO(render_message_pdf("word " * 200)))
    assert len(reader.pages) == 1
    assert reader.pages[0].extract_text().count("word") == 200


def test_render_message_pdf_keeps_non_latin_names():
    font = find_unicode_font()
    if font is None:
        pytest.skip("no Unicode TTF font installed")

    reader = PdfReader(BytesIO(render_message_pdf("1) Łukasz th14\n", font_path=font)))
    text = reader.pages[0].extract_text()
    assert "Łukasz th14" in text


def test_resolve_fonts_falls_back_to_helvetica():
    assert resolve_fonts("/nonexistent/font.ttf") == FALLBACK_FONTS
    assert render_message_pdf("1) Ann th12\n", font_path="/nonexistent/font.ttf").startswith(b"%PDF")
