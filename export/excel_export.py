"""Excel-Export für Gruppenliste, Wechselplan und Notenliste (openpyxl)."""

import logging
from pathlib import Path
from typing import Optional

from engine.plan import RotationPlan
from engine.turn_calendar import expand_year
from models.assignment import Period
from models.grade import GradeBook
from models.wechselplan_data import WechselplanData

from export.helpers import (
    COLORS, column_headers, group_color, rotation_table_rows,
)

logger = logging.getLogger(__name__)


class ExcelExporter:
    """Exportiert einen berechneten RotationPlan in eine Excel-Datei.

    Blätter:
      - Gruppenliste: Schüler je Gruppe, Klassenangaben, Turnusdaten und
        Lehrkräfte (Standardlayout siehe gruppenliste_columns)
      - Wechselplan:  Gruppe pro Lehrkraft und Turnus
      - Notenliste:   optional, Noten je Lehrkraft + Durchschnitte
    """

    # Spaltenlayout der Gruppenliste (1-basiert, wie openpyxl)
    GROUP_COL_START = 2       # B: erste Gruppe, Spalte A enthält die Nummer
    MIN_GROUP_SLOTS = 4       # B..E sind immer für Gruppen reserviert
    MIN_TURN_SLOTS  = 8       # I..P sind immer für Turnusse reserviert
    DATA_ROW_START  = 3       # Zeile 1: Überschriften, Zeile 2: Untertitel

    COL_NAME_W = 24
    COL_DATE_W = 12
    COL_TEACHER_W = 24

    def __init__(self, plan: RotationPlan, data: WechselplanData,
                 grade_book: Optional[GradeBook] = None, decimals: int = 1):
        self.plan = plan
        self.data = data
        self.grade_book = grade_book
        self.decimals = decimals

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Excel-Datei mit allen Sheets."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_gruppenliste(wb)
        self._sheet_wechselplan(wb)
        if self.grade_book is not None:
            self._sheet_notenliste(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel-Datei gespeichert: {output_path}")

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _header(self, ws, row: int, col: int, text: str) -> None:
        from openpyxl.styles import Font
        cell = ws.cell(row=row, column=col, value=text)
        cell.fill = self._fill(COLORS["header"])
        cell.font = Font(bold=True, color="FFFFFF", size=10)
        cell.alignment = self._center_align()
        cell.border = self._thin_border()

    # ─── Sheet: Gruppenliste ──────────────────────────────────────────────────

    def gruppenliste_columns(self) -> dict[str, int]:
        """Spaltennummern der Blöcke in der Gruppenliste.

        Standard (bis 4 Gruppen, bis 8 Turnusse): Gruppen B–E, Klasse F,
        Klassenleitung G, Bildungsgangleitung H, Turnusse I–P, Lehrer Q und R.
        Mehr Gruppen oder Turnusse schieben die folgenden Blöcke nach rechts.
        """
        group_slots = max(self.MIN_GROUP_SLOTS, len(self.data.groups))
        turn_slots = max(self.MIN_TURN_SLOTS, len(self.plan.columns))
        info = self.GROUP_COL_START + group_slots
        turns = info + 3
        am = turns + turn_slots
        return {"class": info, "head": info + 1, "lead": info + 2,
                "turns": turns, "am": am, "pm": am + 1}

    def _sheet_gruppenliste(self, wb) -> None:
        from openpyxl.utils import get_column_letter
        ws = wb.create_sheet("Gruppenliste")
        cols = self.gruppenliste_columns()

        self._header(ws, 1, 1, "Nr.")
        ws.column_dimensions["A"].width = 5
        max_students = max((len(g.students) for g in self.data.groups), default=0)
        for r in range(max_students):
            ws.cell(row=self.DATA_ROW_START + r, column=1, value=r + 1)

        # Gruppen: eine Spalte je Gruppe, "Nachname Vorname"
        for idx, group in enumerate(self.data.groups):
            col = self.GROUP_COL_START + idx
            self._header(ws, 1, col, group.label)
            ws.cell(row=2, column=col, value=f"{len(group.students)} Schüler")
            for r, student in enumerate(group.students, self.DATA_ROW_START):
                ws.cell(row=r, column=col, value=f"{student.last_name} {student.first_name}")
            ws.column_dimensions[get_column_letter(col)].width = self.COL_NAME_W

        # Klasse, Klassenleitung, Bildungsgangleitung in Zeile 1
        for key, label, value in (("class", "Klasse", self.data.class_name),
                                  ("head", "Klassenleitung", self.data.class_head),
                                  ("lead", "Bildungsgangleitung", self.data.class_lead)):
            col = cols[key]
            self._header(ws, 1, col, value or "")
            ws.cell(row=2, column=col, value=label)
            ws.column_dimensions[get_column_letter(col)].width = self.COL_NAME_W

        # Turnusdaten: nur Unterrichtswochen, chronologisch, vierstelliges Jahr
        for column in self.plan.columns:
            col = cols["turns"] + column.index
            self._header(ws, 1, col, column.title)
            ws.cell(row=2, column=col, value=column.key)
            for r, week in enumerate(column.window.weeks, self.DATA_ROW_START):
                ws.cell(row=r, column=col, value=expand_year(week.date))
            ws.column_dimensions[get_column_letter(col)].width = self.COL_DATE_W

        # Lehrkräfte je Tageshälfte
        for col, period in ((cols["am"], Period.AM), (cols["pm"], Period.PM)):
            self._header(ws, 1, col, f"Lehrer {period.label}")
            for r, assignment in enumerate(self.data.assignments_for(period), self.DATA_ROW_START):
                ws.cell(row=r, column=col, value=assignment.teacher_display_name)
            ws.column_dimensions[get_column_letter(col)].width = self.COL_TEACHER_W

        if len(self.data.groups) > self.MIN_GROUP_SLOTS:
            logger.info(
                f"Gruppenliste: {len(self.data.groups)} Gruppen, folgende Spalten "
                f"beginnen bei {get_column_letter(cols['class'])}"
            )
        ws.freeze_panes = "B3"

    # ─── Sheet: Wechselplan ───────────────────────────────────────────────────

    def _sheet_wechselplan(self, wb) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter
        ws = wb.create_sheet("Wechselplan")

        headers = ["Lehrkraft", "Fach", "Lerninhalt", "Raum"] + column_headers(self.plan.columns)
        row = 1
        for period in (Period.AM, Period.PM):
            rows = self.plan.rows_for(period)
            if not rows:
                continue
            title = f"{self.plan.weekday_name} {period.label}"
            time_range = self.data.period_time_range(period)
            if time_range:
                title += f": {time_range}"
            ws.cell(row=row, column=1, value=title).font = Font(bold=True, size=12)
            row += 1

            for col, text in enumerate(headers, 1):
                self._header(ws, row, col, text)
            ws.row_dimensions[row].height = 30
            row += 1

            table = rotation_table_rows(self.plan, rows)
            border = self._thin_border()
            for r_idx, cells in enumerate(table):
                is_footer = r_idx == len(table) - 1
                groups = rows[r_idx].groups if not is_footer else []
                for col, text in enumerate(cells, 1):
                    cell = ws.cell(row=row, column=col, value=text)
                    cell.border = border
                    if col > 4:
                        cell.alignment = self._center_align(wrap=False)
                        if is_footer:
                            cell.fill = self._fill(COLORS["footer"])
                        else:
                            cell.fill = self._fill(group_color(groups[col - 5]))
                    elif is_footer:
                        cell.fill = self._fill(COLORS["footer"])
                row += 1
            row += 1

        for col in range(1, len(headers) + 1):
            width = 22 if col <= 4 else 14
            ws.column_dimensions[get_column_letter(col)].width = width

    # ─── Sheet: Notenliste ────────────────────────────────────────────────────

    def _sheet_notenliste(self, wb) -> None:
        from openpyxl.utils import get_column_letter
        from engine.grades import averages_for_class

        book = self.grade_book
        ws = wb.create_sheet("Notenliste")
        averages = averages_for_class(book, self.decimals)

        headers = ["Nr.", "Nachname", "Vorname"]
        for t in book.teachers:
            headers += [f"{t.display_name} 1. Hj.", f"{t.display_name} 2. Hj."]
        headers += ["Ø 1. Halbjahr", "Ø 2. Halbjahr"]
        for col, text in enumerate(headers, 1):
            self._header(ws, 1, col, text)
        ws.row_dimensions[1].height = 30

        avg_fill = self._fill(COLORS["grade"])
        for r, student in enumerate(book.sorted_students(), 2):
            values: list = [r - 1, student.last_name, student.first_name]
            for t in book.teachers:
                values.append(book.grade_for(student.id, t.id, "first"))
                values.append(book.grade_for(student.id, t.id, "second"))
            avg = averages[student.id]
            values += [
                avg.first if avg.first is not None else "-",
                avg.second if avg.second is not None else "-",
            ]
            for col, v in enumerate(values, 1):
                cell = ws.cell(row=r, column=col, value=v)
                if col > len(values) - 2:
                    cell.fill = avg_fill
                    cell.alignment = self._center_align(wrap=False)

        ws.column_dimensions["A"].width = 5
        for col in range(2, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 14
        ws.freeze_panes = "D2"
