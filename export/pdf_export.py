"""PDF-Export für den Wechselplan (fpdf2).

Zwei Layouts:
  - Wechselplan: Vormittag/Nachmittag, Gruppe pro Lehrkraft und Turnus
  - Turnustage:  nur die Unterrichtsdaten jedes Turnus
"""

import logging
import unicodedata
from pathlib import Path

from fpdf import FPDF

from engine.plan import RotationPlan
from engine.rotation import RotationRow
from engine.turn_calendar import format_date_with_weekday
from models.assignment import Period
from models.wechselplan_data import WechselplanData

from export.helpers import (
    COLORS, WEEKS_FOOTER_LABEL, format_group_cell, group_color, hex_to_rgb,
    row_header_cells, today_str,
)

logger = logging.getLogger(__name__)

# Zeichen außerhalb von Latin-1, die in den Standardschriften fehlen
_PDF_REPLACEMENTS = {
    "—": "-", "–": "-", "─": "-", "„": '"', "“": '"', "”": '"', "’": "'",
    "€": "EUR", "ł": "l", "Ł": "L", "ı": "i", "đ": "d", "Đ": "D",
}


def _latin1_char(ch: str) -> str:
    """Zeichen unverändert, ohne Akzent ('Ş' → 'S') oder '?'."""
    try:
        ch.encode("latin-1")
        return ch
    except UnicodeEncodeError:
        pass
    base = "".join(c for c in unicodedata.normalize("NFKD", ch) if not unicodedata.combining(c))
    try:
        base.encode("latin-1")
    except UnicodeEncodeError:
        return "?"
    return base or "?"


def _pdf_safe(text: str) -> str:
    """Macht Text für die fpdf2-Standardschriften (Latin-1) druckbar."""
    for old, new in _PDF_REPLACEMENTS.items():
        text = text.replace(old, new)
    return "".join(_latin1_char(ch) for ch in text)


# ─── Seitenmaße (A4 quer, 10 mm Rand) ─────────────────────────────────────────
# Tabellenbreite 277 mm: Lehrkraft, Fach, Lerninhalt und Raum fest,
# die Turnus-Spalten teilen sich den Rest.

_USABLE_W = 277
_COLS = {
    "teacher": 42,
    "subject": 30,
    "content": 36,
    "room":    17,
}
_FIXED_W = sum(_COLS.values())
_TOP_Y         = 22.0  # mm, erste Zeile unter der Kopfzeile
_ROW_HEADER_H  = 7    # mm
_ROW_H         = 7    # mm
_FONT_HEADER   = 8    # pt
_FONT_CONTENT  = 8    # pt
_FONT_TINY     = 6    # pt
_LINE_H        = 3.5  # mm pro Zeile
_PAGE_BOTTOM   = 190  # mm, darunter neue Seite


class _WechselplanPdf(FPDF):
    """A4-Querformat mit Schulname/Titel im Kopf und Datum/Seitenzahl im Fuß."""

    def __init__(self, school_name: str, title: str):
        super().__init__(orientation="L", unit="mm", format="A4")
        self.school_name = school_name
        self.page_title = title
        self.alias_nb_pages()
        self.set_auto_page_break(auto=False)
        self.set_margins(left=10, top=_TOP_Y, right=10)

    def header(self):
        self.set_xy(10, 8)
        self.set_font("Helvetica", "B", 11)
        half = (self.w - 20) / 2
        self.cell(half, 7, _pdf_safe(self.school_name), align="L")
        self.cell(half, 7, _pdf_safe(self.page_title), align="R")
        self.set_draw_color(120, 120, 120)
        self.line(10, 17, self.w - 10, 17)

    def footer(self):
        self.set_xy(10, -13)
        self.set_font("Helvetica", "I", 7)
        self.cell(0, 6, f"Stand: {today_str()}   Seite {self.page_no()}/{{nb}}", align="C")

    def new_page(self) -> float:
        """Neue Seite; gibt die Y-Position der ersten Tabellenzeile zurück."""
        self.add_page()
        return _TOP_Y

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.output(str(path))

    # ─── Zellen ───────────────────────────────────────────────────────────────

    def draw_cell(self, x: float, y: float, w: float, h: float, text: str = "",
                  bg_hex: str | None = None, bold: bool = False,
                  font_size: int = _FONT_CONTENT,
                  text_color: tuple[int, int, int] = (0, 0, 0),
                  align: str = "C") -> None:
        """Gerahmte Zelle, Text vertikal zentriert (höchstens zwei Zeilen)."""
        self.set_draw_color(180, 180, 180)
        if bg_hex:
            self.set_fill_color(*hex_to_rgb(bg_hex))
        self.rect(x, y, w, h, style="DF" if bg_hex else "D")
        if not text:
            return

        self.set_font("Helvetica", "B" if bold else "", font_size)
        self.set_text_color(*text_color)
        lines = [ln for ln in _pdf_safe(text).splitlines() if ln][:2]
        max_chars = max(4, int(w / 1.7))
        top = y + max(0.5, (h - len(lines) * _LINE_H) / 2)
        for n, line in enumerate(lines):
            self.set_xy(x, top + n * _LINE_H)
            self.cell(w, _LINE_H, line[:max_chars], align=align)
        self.set_text_color(0, 0, 0)

    def draw_text(self, x: float, y: float, text: str, bold: bool = False,
                  font_size: int = 9) -> float:
        """Freier Text (Info-Block); gibt Y danach zurück."""
        self.set_font("Helvetica", "B" if bold else "", font_size)
        self.set_xy(x, y)
        self.cell(0, 5, _pdf_safe(text), align="L")
        return y + 5


class PdfExporter:
    """Exportiert einen berechneten RotationPlan in PDF-Dateien."""

    def __init__(self, plan: RotationPlan, data: WechselplanData,
                 school_name: str = ""):
        self.plan = plan
        self.data = data
        self.school_name = school_name
        self._table_x = 10.0
        turn_count = max(len(plan.columns), 1)
        self._turn_w = (_USABLE_W - _FIXED_W) / turn_count

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_wechselplan(self, output_path: Path) -> None:
        """Wechselplan mit Vormittags- und Nachmittagstabelle.

        Eine Tageshälfte ohne Lehrer-Zuweisungen wird weggelassen.
        """
        pdf = _WechselplanPdf(
            self.school_name, f"Wechselplan {self.plan.class_name} - {self.plan.weekday_name}"
        )
        y = self._draw_info_block(pdf, pdf.new_page())
        for period in (Period.AM, Period.PM):
            rows = self.plan.rows_for(period)
            if not rows:
                logger.debug(f"PDF: keine Zuweisungen für {period.label}, Abschnitt entfällt")
                continue
            # Ganze Tabelle zusammenhalten, sofern sie auf eine Seite passt;
            # sonst genügt Platz für Kopf und zwei Zeilen
            needed = _ROW_HEADER_H * 2 + _ROW_H * (len(rows) + 1)
            if _TOP_Y + needed > _PAGE_BOTTOM:
                needed = _ROW_HEADER_H * 2 + _ROW_H * 2
            top = y + 3
            if top + needed > _PAGE_BOTTOM:
                top = pdf.new_page()
            y = self._draw_period_table(pdf, top, period, rows)

        pdf.save(output_path)
        logger.info(f"Wechselplan-PDF gespeichert: {output_path}")

    def export_turnus_dates(self, output_path: Path) -> None:
        """Turnustage: pro Turnus alle Unterrichtsdaten (ohne Ferienwochen)."""
        pdf = _WechselplanPdf(
            self.school_name, f"Turnustage {self.plan.class_name} - {self.plan.weekday_name}"
        )
        y = pdf.new_page()

        columns = self.plan.columns
        label_w = 30
        col_w = (_USABLE_W - label_w) / max(len(columns), 1)
        x0 = self._table_x

        # Kopfzeile
        self._header_cell(pdf, x0, y, label_w, "")
        for i, c in enumerate(columns):
            self._header_cell(pdf, x0 + label_w + i * col_w, y, col_w, c.title)
        y += _ROW_HEADER_H

        meta_rows = [
            ("Beginn", [c.window.week_start_monday() for c in columns]),
            ("Ende", [c.window.week_end_sunday() for c in columns]),
            ("KW", [c.window.kw_range for c in columns]),
        ]
        for label, values in meta_rows:
            pdf.draw_cell(x0, y, label_w, _ROW_H, label, bold=True, bg_hex=COLORS["footer"])
            for i, v in enumerate(values):
                pdf.draw_cell(x0 + label_w + i * col_w, y, col_w, _ROW_H, v)
            y += _ROW_H

        max_weeks = max((c.window.week_count for c in columns), default=0)
        for week_idx in range(max_weeks):
            if y + _ROW_H > _PAGE_BOTTOM:
                y = pdf.new_page()
            pdf.draw_cell(x0, y, label_w, _ROW_H, f"{week_idx + 1}. Woche", bold=True)
            for i, c in enumerate(columns):
                weeks = c.window.weeks
                text = format_date_with_weekday(weeks[week_idx].date) if week_idx < len(weeks) else ""
                pdf.draw_cell(x0 + label_w + i * col_w, y, col_w, _ROW_H, text)
            y += _ROW_H

        pdf.draw_cell(x0, y, label_w, _ROW_H, WEEKS_FOOTER_LABEL, bold=True,
                      bg_hex=COLORS["footer"])
        for i, c in enumerate(columns):
            pdf.draw_cell(x0 + label_w + i * col_w, y, col_w, _ROW_H, c.week_label,
                          bg_hex=COLORS["footer"])

        pdf.save(output_path)
        logger.info(f"Turnustage-PDF gespeichert: {output_path}")

    # ─── Tabellenzeichnung ────────────────────────────────────────────────────

    def _header_cell(self, pdf: _WechselplanPdf, x: float, y: float, w: float,
                     text: str) -> None:
        pdf.draw_cell(x, y, w, _ROW_HEADER_H, text, bg_hex=COLORS["header"],
                      bold=True, font_size=_FONT_HEADER, text_color=(255, 255, 255))

    def _draw_info_block(self, pdf: _WechselplanPdf, y: float) -> float:
        x = self._table_x
        y = pdf.draw_text(x, y, f"Klasse: {self.plan.class_name}", bold=True, font_size=11)
        y = pdf.draw_text(x, y, f"Wochentag: {self.plan.weekday_name}")
        groups = ", ".join(
            f"Gruppe {g.id} ({len(g.students)})" for g in self.data.groups
        )
        if groups:
            y = pdf.draw_text(x, y, f"Gruppen: {groups}")
        if self.data.additional_info:
            y = pdf.draw_text(x, y, self.data.additional_info, font_size=8)
        return y

    def _draw_period_table(
        self, pdf: _WechselplanPdf, y: float, period: Period, rows: list[RotationRow]
    ) -> float:
        """Zeichnet die Tabelle einer Tageshälfte und gibt Y danach zurück.

        Passt eine Zeile nicht mehr auf die Seite, geht es auf einer neuen
        Seite mit wiederholtem Tabellenkopf weiter.
        """
        x = self._table_x
        time_range = self.data.period_time_range(period)
        title = f"{self.plan.weekday_name} {period.label}"
        if time_range:
            title += f": {time_range}"

        y = self._draw_period_header(pdf, y, title)
        row_bg = COLORS["am"] if period is Period.AM else COLORS["pm"]
        for row in rows:
            if y + _ROW_H > _PAGE_BOTTOM:
                y = self._draw_period_header(pdf, pdf.new_page(), f"{title} (Forts.)")
            cx = x
            for text, key in zip(row_header_cells(row), ("teacher", "subject", "content", "room")):
                align = "L" if key == "teacher" else "C"
                pdf.draw_cell(cx, y, _COLS[key], _ROW_H, text, bg_hex=row_bg, align=align)
                cx += _COLS[key]
            for group in row.groups:
                pdf.draw_cell(cx, y, self._turn_w, _ROW_H, format_group_cell(group),
                              bg_hex=group_color(group), bold=True)
                cx += self._turn_w
            y += _ROW_H

        # Fußzeile mit Unterrichtswochen
        if y + _ROW_H > _PAGE_BOTTOM:
            y = self._draw_period_header(pdf, pdf.new_page(), f"{title} (Forts.)")
        pdf.draw_cell(x, y, _FIXED_W, _ROW_H, WEEKS_FOOTER_LABEL, bold=True,
                      bg_hex=COLORS["footer"], align="R")
        cx = x + _FIXED_W
        for c in self.plan.columns:
            pdf.draw_cell(cx, y, self._turn_w, _ROW_H, c.week_label, bg_hex=COLORS["footer"])
            cx += self._turn_w
        return y + _ROW_H

    def _draw_period_header(self, pdf: _WechselplanPdf, y: float, title: str) -> float:
        """Zweistufiger Kopf: Titel + 'Turnus n', darunter Spaltennamen + Datumsbereich."""
        x = self._table_x
        columns = self.plan.columns
        self._header_cell(pdf, x, y, _FIXED_W, title)
        for i, c in enumerate(columns):
            self._header_cell(pdf, x + _FIXED_W + i * self._turn_w, y, self._turn_w, c.title)
        y += _ROW_HEADER_H

        cx = x
        for label, key in (("Lehrkraft", "teacher"), ("Fach", "subject"),
                           ("Lerninhalt", "content"), ("Raum", "room")):
            pdf.draw_cell(cx, y, _COLS[key], _ROW_HEADER_H, label, bold=True,
                          bg_hex=COLORS["footer"], font_size=_FONT_HEADER)
            cx += _COLS[key]
        for c in columns:
            pdf.draw_cell(cx, y, self._turn_w, _ROW_HEADER_H, c.window.format_range(),
                          bg_hex=COLORS["footer"], font_size=_FONT_TINY)
            cx += self._turn_w
        return y + _ROW_HEADER_H
