"""
PDF exports: the revenue/expense ledger table and the printable payment receipt.

Layout coordinates are in millimetres on an A4 portrait page, measured from
the top-left corner like the on-screen layout, and converted to reportlab's
bottom-left origin when drawn.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Table, TableStyle

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4

# Receipt background artwork is 700x595 px stretched across the page width.
RECEIPT_PX_TO_MM = 210 / 700
RECEIPT_ART_HEIGHT_PX = 595


@dataclass(frozen=True)
class ReceiptField:
    key: str
    left_px: int
    top_px: int


# Positions match the printed receipt artwork.
RECEIPT_FIELDS = (
    ReceiptField("date", 87, 137),
    ReceiptField("student", 130, 190),
    ReceiptField("amount", 117, 244),
    ReceiptField("method", 195, 298),
    ReceiptField("course", 120, 350),
)


def _usable_image(path: str | None) -> str | None:
    if path and os.path.isfile(path):
        return path
    if path:
        logger.warning("Image not found, skipping: %s", path)
    return None


LEDGER_MARGIN = 14 * mm
LEDGER_TABLE_WIDTH = PAGE_WIDTH - 2 * LEDGER_MARGIN

_styles = getSampleStyleSheet()
_CELL = ParagraphStyle("LedgerCell", parent=_styles["Normal"], fontSize=9, leading=11)
_CELL_BOLD = ParagraphStyle("LedgerCellBold", parent=_CELL, fontName="Helvetica-Bold")


def _column_widths(count: int, weights: Sequence[float] | None, total: float) -> list[float]:
    weights = list(weights) if weights and len(weights) == count else [1.0] * count
    scale = total / sum(weights)
    return [w * scale for w in weights]


def ledger_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    width: float = LEDGER_TABLE_WIDTH,
    col_weights: Sequence[float] | None = None,
) -> Table:
    """
    Body cells are Paragraphs so long text wraps inside its column; the
    column widths always add up to `width`.
    """
    body = []
    for i, row in enumerate(rows):
        style = _CELL_BOLD if i == len(rows) - 1 else _CELL
        body.append([Paragraph(escape("" if v is None else str(v)), style) for v in row])
    data = [list(headers)] + body
    table = Table(data, colWidths=_column_widths(len(headers), col_weights, width), repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2980ba")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#c8c8c8")),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
    for i in range(2, len(data), 2):
        style.append(("BACKGROUND", (0, i), (-1, i), colors.HexColor("#f5f5f5")))
    table.setStyle(TableStyle(style))
    return table


def ledger_pdf(
    *,
    title: str,
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    col_weights: Sequence[float] | None = None,
    logo_path: str | None = None,
    today: date | None = None,
) -> bytes:
    """
    Render a titled table. The caller supplies every row, including any
    trailing total row; the last row is set in bold.
    """
    logo = _usable_image(logo_path)
    stamp = (today or date.today()).strftime("%Y-%m-%d")

    def _header(c: canvas.Canvas, _doc: Any) -> None:
        c.saveState()
        if logo:
            c.drawImage(logo, 15 * mm, PAGE_HEIGHT - 25 * mm, width=15 * mm, height=15 * mm, preserveAspectRatio=True, mask="auto")
        c.setFont("Helvetica-Bold", 18)
        c.drawString(58 * mm, PAGE_HEIGHT - 20 * mm, title)
        c.setFont("Helvetica", 12)
        c.drawRightString(PAGE_WIDTH - 10 * mm, PAGE_HEIGHT - 20 * mm, stamp)
        c.restoreState()

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        topMargin=30 * mm,
        bottomMargin=15 * mm,
        leftMargin=LEDGER_MARGIN,
        rightMargin=LEDGER_MARGIN,
        title=title,
    )
    table = ledger_table(headers, rows, width=doc.width, col_weights=col_weights)
    doc.build([table], onFirstPage=_header, onLaterPages=_header)
    return buf.getvalue()


def receipt_pdf(values: dict[str, str], *, background_path: str | None = None) -> bytes:
    """
    Print receipt values onto the receipt artwork.

    `values` is keyed by the RECEIPT_FIELDS keys; missing keys print blank.
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    background = _usable_image(background_path)
    art_height = RECEIPT_ART_HEIGHT_PX * RECEIPT_PX_TO_MM * mm
    if background:
        c.drawImage(background, 0, PAGE_HEIGHT - art_height, width=PAGE_WIDTH, height=art_height, preserveAspectRatio=True, mask="auto")
    else:
        c.setStrokeColor(colors.HexColor("#3CD2F9"))
        c.rect(5 * mm, PAGE_HEIGHT - art_height, PAGE_WIDTH - 10 * mm, art_height - 5 * mm, stroke=1, fill=0)

    c.setFillColor(colors.black)
    c.setFont("Helvetica-Bold", 13)
    for f in RECEIPT_FIELDS:
        # Text sits one line below the field's anchor on the artwork.
        x = f.left_px * RECEIPT_PX_TO_MM * mm
        y = PAGE_HEIGHT - (f.top_px + 31) * RECEIPT_PX_TO_MM * mm
        c.drawString(x, y, values.get(f.key) or "")

    c.showPage()
    c.save()
    return buf.getvalue()
