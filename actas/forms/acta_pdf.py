"""
Acta PDF Generator
==================
Draws a VisualDocument onto letter-landscape pages with reportlab.

Layout (top to bottom, inside the kind's margins):
  - Header box: logo + acta title + institution
  - Fact table: Fecha / Persona Asignada / Lugar (+ Desde / Hacia)
  - Line-item table, header row repeated on every page
  - Legal paragraph with the interpolated values in bold
  - Three signature lines

Margins come from the kind's PageConfig as [top, right, bottom, left] mm.
The logo raster is resampled at image_scale and JPEG-encoded at
image_quality before it is embedded.
"""

import io
import re
import logging
from dataclasses import dataclass

from PIL import Image
from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import letter, landscape, portrait
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from actas.core.paths import find_logo
from actas.forms.kinds import PageConfig
from actas.forms.renderer import VisualDocument

log = logging.getLogger("actas.pdf")

# ═══════════════════════════════════════════════════════════════════════════════
# STYLE
# ═══════════════════════════════════════════════════════════════════════════════
BLACK   = HexColor("#000000")
BORDER  = HexColor("#D1D5DB")           # gray-300 table borders
HDR_BG  = Color(0.96, 0.96, 0.97)       # item table header fill
NAVY    = HexColor("#1a2744")           # text-logo fallback

FONT      = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
PAGE_SIZES = {"letter": letter}

LOGO_W, LOGO_H = 80, 53
HEADER_H = 64
FACT_ROW_H = 20
FACT_LABEL_W = 0.25                     # fraction of usable width
ITEM_COL_W = (0.32, 0.53, 0.15)
ITEM_HDR_H = 22
ITEM_MIN_ROW_H = 20
BLANK_ROW_H = 24
CELL_PAD = 6
BODY_SIZE = 10
LEGAL_LINE_H = 14
SIGNATURE_GAP = 36
SIGNATURE_BLOCK_H = 70


@dataclass(frozen=True)
class PdfFile:
    filename: str
    data: bytes
    pages: int
    page: PageConfig


def page_size(cfg: PageConfig):
    size = PAGE_SIZES.get(cfg.page_size, letter)
    return landscape(size) if cfg.orientation == "landscape" else portrait(size)


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def _logo_image(path, scale: int, quality: float):
    """Resample the logo at ``scale`` × its drawn size, JPEG at ``quality``.
    Returns (ImageReader, draw_w, draw_h)."""
    with Image.open(path) as src:
        iw, ih = src.size
        fit = min(LOGO_W / iw, LOGO_H / ih)
        dw, dh = iw * fit, ih * fit
        rgba = src.convert("RGBA")
    alpha = rgba.getchannel("A")
    flat = Image.new("RGB", rgba.size, "white")
    scaled = None
    buf = io.BytesIO()
    try:
        flat.paste(rgba, mask=alpha)
        scaled = flat.resize((max(1, round(dw * scale)), max(1, round(dh * scale))),
                             Image.LANCZOS)
        scaled.save(buf, format="JPEG", quality=round(quality * 100))
    finally:
        # in-memory images are not released by a with block
        for im in (rgba, alpha, flat, scaled):
            if im is not None:
                im.close()
    buf.seek(0)
    return ImageReader(buf), dw, dh


def _runs_width(runs, size):
    return sum(stringWidth(t, f, size) for t, f in runs)


def _break_runs(runs, max_w, size):
    """Cut one unbreakable word into character pieces no wider than ``max_w``."""
    pieces, piece, piece_w = [], [], 0.0
    for text, font in runs:
        for ch in text:
            w = stringWidth(ch, font, size)
            if piece and piece_w + w > max_w:
                pieces.append(piece)
                piece, piece_w = [], 0.0
            piece.append((ch, font))
            piece_w += w
    if piece:
        pieces.append(piece)
    return pieces


def wrap_text(text, font, size, max_w):
    """simpleSplit, plus a character break for words wider than ``max_w``."""
    lines = []
    for ln in simpleSplit(text, font, size, max_w):
        if stringWidth(ln, font, size) <= max_w:
            lines.append(ln)
            continue
        for piece in _break_runs([(ln, font)], max_w, size):
            lines.append("".join(t for t, _ in piece))
    return lines or [""]


def wrap_segments(segments, max_w, size=BODY_SIZE):
    """Word-wrap (text, emphasized) runs into lines of (text, font) runs.

    Words are split on whitespace across run boundaries, so punctuation glued
    to an emphasized value stays on the same line.
    """
    words, word = [], []
    for text, bold in segments:
        font = FONT_BOLD if bold else FONT
        for piece in re.split(r"(\s+)", text):
            if not piece:
                continue
            if piece.isspace():
                if word:
                    words.append(word)
                    word = []
                continue
            word.append((piece, font))
    if word:
        words.append(word)

    space_w = stringWidth(" ", FONT, size)
    lines, line, line_w = [], [], 0.0
    for word in words:
        w = _runs_width(word, size)
        if w > max_w:
            if line:
                lines.append(line)
            pieces = _break_runs(word, max_w, size)
            lines.extend(pieces[:-1])
            line, line_w = list(pieces[-1]), _runs_width(pieces[-1], size)
            continue
        if line and line_w + space_w + w > max_w:
            lines.append(line)
            line, line_w = [], 0.0
        if line:
            line.append((" ", FONT))
            line_w += space_w
        line.extend(word)
        line_w += w
    if line:
        lines.append(line)

    merged = []
    for ln in lines:
        runs = []
        for txt, font in ln:
            if runs and runs[-1][1] == font:
                runs[-1] = (runs[-1][0] + txt, font)
            else:
                runs.append((txt, font))
        merged.append(runs)
    return merged


# ═══════════════════════════════════════════════════════════════════════════════
# PDF GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════

def generate_acta_pdf(visual: VisualDocument, page_config: PageConfig = None) -> PdfFile:
    """Draw ``visual`` and return the finished PDF bytes with its filename."""
    cfg = page_config or visual.page
    W, H = page_size(cfg)
    m_top, m_right, m_bottom, m_left = (v * mm for v in cfg.margins_mm)
    ML, MR = m_left, W - m_right
    UW = MR - ML
    TOP, BOTTOM = m_top, H - m_bottom        # top-origin limits

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(W, H))
    c.setTitle(visual.title)
    c.setAuthor(visual.institution)
    c.setSubject(visual.filename)
    pages = 1

    # reportlab y = from bottom; layout cursor = from top
    def Y(top_y):
        return H - top_y

    def cell(x, yt, w, h, fill=None):
        if fill is not None:
            c.setFillColor(fill)
            c.rect(x, Y(yt) - h, w, h, fill=1, stroke=0)
        c.setStrokeColor(BORDER)
        c.setLineWidth(0.7)
        c.rect(x, Y(yt) - h, w, h, fill=0, stroke=1)

    def new_page():
        nonlocal pages
        c.showPage()
        pages += 1
        return TOP

    # ── Header box: logo + title + institution ───────────────────────────────
    cur = TOP
    logo, text_x = None, ML + 80
    logo_path = find_logo()
    if logo_path:
        try:
            logo = _logo_image(logo_path, cfg.image_scale, cfg.image_quality)
            text_x = ML + 10 + logo[1] + 14
        except Exception as e:
            log.warning("Logo load failed (%s): %s", logo_path, e)
    text_w = MR - 12 - text_x
    title_lines = wrap_text(visual.title, FONT_BOLD, 12, text_w)
    inst_lines = wrap_text(visual.institution, FONT, 10, text_w)
    inst_top = 28 + 15 * (len(title_lines) - 1) + 16
    header_h = max(HEADER_H, inst_top + 12 * (len(inst_lines) - 1) + 20)
    cell(ML, cur, UW, header_h)
    if logo:
        img, dw, dh = logo
        c.drawImage(img, ML + 10, Y(cur + (header_h + dh) / 2), width=dw, height=dh)
    else:
        # Text-only fallback
        c.setFillColor(NAVY)
        c.rect(ML + 10, Y(cur + 16) - 32, 56, 32, fill=1, stroke=0)
        c.setFillColor(HexColor("#FFFFFF"))
        c.setFont(FONT_BOLD, 13)
        c.drawCentredString(ML + 38, Y(cur + 16) - 21, "MODO")
    c.setFillColor(BLACK)
    c.setFont(FONT_BOLD, 12)
    for i, ln in enumerate(title_lines):
        c.drawString(text_x, Y(cur + 28 + 15 * i), ln)
    c.setFont(FONT, 10)
    for i, ln in enumerate(inst_lines):
        c.drawString(text_x, Y(cur + inst_top + 12 * i), ln)
    cur += header_h + 16

    # ── Fact table ────────────────────────────────────────────────────────────
    label_w = UW * FACT_LABEL_W
    for label, value in visual.facts:
        label_lines = wrap_text(label, FONT, BODY_SIZE, label_w - 2 * CELL_PAD)
        value_lines = wrap_text(value, FONT, BODY_SIZE, UW - label_w - 2 * CELL_PAD)
        row_h = max(FACT_ROW_H, max(len(label_lines), len(value_lines)) * 12 + 8)
        if cur + row_h > BOTTOM:
            cur = new_page()
        cell(ML, cur, label_w, row_h)
        cell(ML + label_w, cur, UW - label_w, row_h)
        c.setFillColor(BLACK)
        c.setFont(FONT, BODY_SIZE)
        for lines, x in ((label_lines, ML + CELL_PAD), (value_lines, ML + label_w + CELL_PAD)):
            ty = cur + 14
            for ln in lines:
                c.drawString(x, Y(ty), ln)
                ty += 12
        cur += row_h
    cur += 16

    # ── Line-item table ───────────────────────────────────────────────────────
    col_w = [UW * f for f in ITEM_COL_W]
    col_x = [ML + sum(col_w[:i]) for i in range(len(col_w))]

    def table_header(yt):
        for name, x, w in zip(visual.columns, col_x, col_w):
            cell(x, yt, w, ITEM_HDR_H, fill=HDR_BG)
            c.setFillColor(BLACK)
            c.setFont(FONT_BOLD, 9)
            c.drawCentredString(x + w / 2, Y(yt + 14), name)
        return yt + ITEM_HDR_H

    if cur + ITEM_HDR_H + ITEM_MIN_ROW_H > BOTTOM:
        cur = new_page()
    cur = table_header(cur)

    rows = list(visual.rows) + [("", "", "")] * visual.blank_rows
    data_rows = len(visual.rows)
    for idx, row in enumerate(rows):
        wrapped = [wrap_text(val, FONT, BODY_SIZE, w - 2 * CELL_PAD)
                   for val, w in zip(row, col_w)]
        if idx >= data_rows:
            row_h = BLANK_ROW_H
        else:
            row_h = max(ITEM_MIN_ROW_H, max(len(w) for w in wrapped) * 12 + 8)
        if cur + row_h > BOTTOM:
            cur = new_page()
            cur = table_header(cur)
        for lines, x, w in zip(wrapped, col_x, col_w):
            cell(x, cur, w, row_h)
            c.setFillColor(BLACK)
            c.setFont(FONT, BODY_SIZE)
            ty = cur + 14
            for ln in lines:
                c.drawCentredString(x + w / 2, Y(ty), ln)
                ty += 12
        cur += row_h
    cur += 24

    # ── Legal paragraph ───────────────────────────────────────────────────────
    for runs in wrap_segments(visual.legal_segments, UW):
        if cur + LEGAL_LINE_H > BOTTOM:
            cur = new_page()
        x = ML
        for txt, font in runs:
            c.setFont(font, BODY_SIZE)
            c.drawString(x, Y(cur + BODY_SIZE), txt)
            x += c.stringWidth(txt, font, BODY_SIZE)
        cur += LEGAL_LINE_H

    # ── Signatures ────────────────────────────────────────────────────────────
    if cur + SIGNATURE_BLOCK_H > BOTTOM:
        cur = new_page()
    line_y = cur + SIGNATURE_BLOCK_H - 24
    n = len(visual.signatures)
    sig_w = (UW - SIGNATURE_GAP * (n - 1)) / n
    c.setStrokeColor(BLACK)
    c.setLineWidth(0.8)
    for i, label in enumerate(visual.signatures):
        x = ML + i * (sig_w + SIGNATURE_GAP)
        c.line(x, Y(line_y), x + sig_w, Y(line_y))
        c.setFont(FONT, BODY_SIZE)
        c.drawCentredString(x + sig_w / 2, Y(line_y + 14), label)
        if i == n - 1:
            tw = c.stringWidth(label, FONT, BODY_SIZE)
            c.setLineWidth(0.5)
            c.line(x + (sig_w - tw) / 2, Y(line_y + 16), x + (sig_w + tw) / 2, Y(line_y + 16))

    c.save()
    data = buf.getvalue()
    log.info("Acta PDF %s: %d item(s), %d page(s), %d bytes",
             visual.filename, data_rows, pages, len(data),
             extra={"kind": visual.kind, "acta_file": visual.filename, "items": data_rows})
    return PdfFile(filename=visual.filename, data=data, pages=pages, page=cfg)
