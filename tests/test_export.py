"""Tests für Export (Excel + PDF) und Terminal-Übersicht."""

from pathlib import Path

import pytest

from data.fake_data import FakeDataGenerator
from engine.plan import RotationPlan, build_plan
from export.excel_export import ExcelExporter
from export.helpers import (
    EMPTY_CELL, WEEKS_FOOTER_LABEL, column_headers, group_color, hex_to_rgb,
    rotation_table_rows,
)
from export.pdf_export import _PAGE_BOTTOM, PdfExporter, _pdf_safe, _WechselplanPdf
from export.tui_renderer import grade_rows, render_rotation_table, render_turn_table
from models.assignment import Assignment, Period
from models.grade import GradeBook, GradeEntry, GradeTeacher
from models.group import Group
from models.student import Student
from models.turn import Turn, Week
from models.wechselplan_data import WechselplanData


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def demo_data() -> WechselplanData:
    return FakeDataGenerator(seed=42).generate()


@pytest.fixture(scope="module")
def demo_plan(demo_data: WechselplanData) -> RotationPlan:
    return build_plan(demo_data)


@pytest.fixture(scope="module")
def demo_grades(demo_data: WechselplanData) -> GradeBook:
    return FakeDataGenerator(seed=42).generate_grades(demo_data)


def _with_holiday_turn(data: WechselplanData) -> WechselplanData:
    """Zwei Turnusse, der zweite liegt komplett in den Ferien."""
    return data.model_copy(update={"turns": [
        Turn(key="TURNUS1", weeks=[Week(week="KW36", date="02.09.24")]),
        Turn(key="TURNUS2", weeks=[Week(week="KW42", date="14.10.24", is_holiday=True),
                                   Week(week="KW43", date="21.10.24", is_holiday=True)]),
    ]})


def _am_teachers(count: int) -> list[Assignment]:
    return [
        Assignment(teacher_id=i, teacher_first_name="Anna", teacher_last_name=f"Lehrkraft {i}",
                   period=Period.AM, subject="Metalltechnik", room="W101")
        for i in range(1, count + 1)
    ]


# ─── Helpers ──────────────────────────────────────────────────────────────────

class TestHelpers:

    def test_hex_to_rgb(self):
        assert hex_to_rgb("4472C4") == (68, 114, 196)
        assert hex_to_rgb("#FFFFFF") == (255, 255, 255)

    def test_group_color_cycles(self):
        assert group_color(Group(id=1)) == group_color(Group(id=7))
        assert group_color(None) != group_color(Group(id=1))

    def test_rotation_rows_with_footer(self, demo_plan: RotationPlan):
        rows = rotation_table_rows(demo_plan, demo_plan.am_rows)
        assert len(rows) == len(demo_plan.am_rows) + 1
        footer = rows[-1]
        assert footer[3] == WEEKS_FOOTER_LABEL
        assert footer[4:] == [c.week_label for c in demo_plan.columns]
        # Erste Lehrkraft im ersten Turnus → Gruppe 1
        assert rows[0][4] == "1"

    def test_empty_turn_has_no_week_label(self, demo_data: WechselplanData):
        """Ein Turnus nur aus Ferienwochen hat keine Wochenangabe."""
        plan = build_plan(_with_holiday_turn(demo_data))
        assert plan.columns[1].window.week_count == 0
        assert plan.columns[1].week_label == ""
        assert plan.columns[0].week_label == "1 UW"

    def test_column_headers(self, demo_data: WechselplanData):
        headers = column_headers(build_plan(_with_holiday_turn(demo_data)).columns)
        assert headers[0].startswith("Turnus 1\n")
        assert headers[1] == f"Turnus 2\n{EMPTY_CELL}"

    def test_pdf_safe(self):
        assert _pdf_safe("a — b – c") == "a - b - c"
        assert _pdf_safe("Şahin") == "Sahin"
        assert _pdf_safe("Łukasz Müller") == "Lukasz Müller"
        assert _pdf_safe("中") == "?"


# ─── Terminal-Übersicht ───────────────────────────────────────────────────────

class TestTuiRenderer:

    def test_rotation_table_dimensions(self, demo_plan: RotationPlan):
        table = render_rotation_table(demo_plan, Period.AM, "07:45 - 11:05")
        assert len(table.columns) == 4 + len(demo_plan.columns)
        assert table.row_count == len(demo_plan.am_rows) + 1
        assert "Vormittag" in table.title

    def test_turn_table(self, demo_plan: RotationPlan):
        table = render_turn_table(demo_plan)
        assert table.row_count == len(demo_plan.columns)

    def test_grade_rows_sorted_and_formatted(self):
        book = GradeBook(
            class_name="X",
            students=[Student(id=1, first_name="Paul", last_name="Koch"),
                      Student(id=2, first_name="Emma", last_name="Braun")],
            teachers=[GradeTeacher(id=1), GradeTeacher(id=2)],
            entries=[
                GradeEntry(student_id=1, teacher_id=1, first=2.0),
                GradeEntry(student_id=1, teacher_id=2, first=3.5),
            ],
        )
        rows = grade_rows(book)
        assert rows[0][0] == "1"
        assert rows[0][2:] == ["-", "-"]
        assert rows[1][2] == "2,8"
        assert rows[1][3] == "-"


# ─── Excel ────────────────────────────────────────────────────────────────────

class TestExcelExport:

    def test_creates_file_with_sheets(self, tmp_path: Path, demo_plan, demo_data, demo_grades):
        from openpyxl import load_workbook
        out = tmp_path / "gruppenliste.xlsx"
        ExcelExporter(demo_plan, demo_data, demo_grades).export(out)
        assert out.exists()
        wb = load_workbook(out)
        assert wb.sheetnames == ["Gruppenliste", "Wechselplan", "Notenliste"]

    def test_without_grades(self, tmp_path: Path, demo_plan, demo_data):
        from openpyxl import load_workbook
        out = tmp_path / "ohne_noten.xlsx"
        ExcelExporter(demo_plan, demo_data).export(out)
        assert "Notenliste" not in load_workbook(out).sheetnames

    def test_gruppenliste_layout(self, tmp_path: Path, demo_plan, demo_data):
        from openpyxl import load_workbook
        out = tmp_path / "layout.xlsx"
        ExcelExporter(demo_plan, demo_data).export(out)
        ws = load_workbook(out)["Gruppenliste"]

        # Spalte A: laufende Nummer, ab B eine Spalte je Gruppe
        first = demo_data.groups[0].students[0]
        assert ws["A3"].value == 1
        assert ws["B1"].value == "Gruppe 1"
        assert ws["B3"].value == f"{first.last_name} {first.first_name}"

        # Klasse, Klassenleitung und Bildungsgangleitung in F1-H1
        assert ws["F1"].value == demo_data.class_name
        assert ws["G1"].value == demo_data.class_head
        assert ws["H1"].value == demo_data.class_lead
        assert ws["G2"].value == "Klassenleitung"

        # Turnus 1 beginnt am 02.09.2024, Jahr vierstellig
        assert ws["I1"].value == "Turnus 1"
        assert ws["I3"].value == "02.09.2024"
        # Turnus 2: unsortiert gespeichert, hier chronologisch
        weeks = demo_plan.columns[1].window.weeks
        dates = [ws.cell(row=r, column=10).value for r in range(3, 3 + len(weeks) + 2)]
        dates = [d for d in dates if d]
        assert len(dates) == demo_plan.columns[1].window.week_count
        assert dates == [w.date[:6] + "20" + w.date[6:] for w in weeks]

        assert ws["Q3"].value == demo_data.am_assignments[0].teacher_display_name
        assert ws["R3"].value == demo_data.pm_assignments[0].teacher_display_name

    def test_gruppenliste_more_than_four_groups(self, tmp_path: Path):
        """Gruppe 5 und 6 bekommen eigene Spalten, die übrigen Blöcke rücken nach rechts."""
        from openpyxl import load_workbook
        data = FakeDataGenerator(seed=3, num_groups=6).generate()
        plan = build_plan(data)
        exporter = ExcelExporter(plan, data)
        out = tmp_path / "sechs.xlsx"
        exporter.export(out)
        ws = load_workbook(out)["Gruppenliste"]

        assert [ws.cell(row=1, column=c).value for c in range(2, 8)] == [
            f"Gruppe {n}" for n in range(1, 7)
        ]
        last = data.groups[5].students[0]
        assert ws.cell(row=3, column=7).value == f"{last.last_name} {last.first_name}"

        cols = exporter.gruppenliste_columns()
        assert cols["class"] == 8
        assert ws.cell(row=1, column=cols["class"]).value == data.class_name
        assert ws.cell(row=1, column=cols["turns"]).value == "Turnus 1"
        assert ws.cell(row=1, column=cols["am"]).value == "Lehrer Vormittag"
        assert ws.cell(row=3, column=cols["am"]).value == data.am_assignments[0].teacher_display_name

    def test_gruppenliste_default_columns(self, demo_plan, demo_data):
        cols = ExcelExporter(demo_plan, demo_data).gruppenliste_columns()
        assert cols == {"class": 6, "head": 7, "lead": 8, "turns": 9, "am": 17, "pm": 18}

    def test_notenliste_averages(self, tmp_path: Path, demo_plan, demo_data):
        from openpyxl import load_workbook
        book = GradeBook(
            class_name=demo_data.class_name,
            students=[Student(id=1, first_name="Emma", last_name="Braun")],
            teachers=[GradeTeacher(id=1, last_name="Koch"), GradeTeacher(id=2, last_name="Wolf")],
            entries=[
                GradeEntry(student_id=1, teacher_id=1, first=2.0),
                GradeEntry(student_id=1, teacher_id=2, first=3.5),
            ],
        )
        out = tmp_path / "noten.xlsx"
        ExcelExporter(demo_plan, demo_data, book).export(out)
        ws = load_workbook(out)["Notenliste"]
        # Nr, Nachname, Vorname, 2 Lehrkräfte × 2 Halbjahre, Ø1, Ø2
        assert ws.cell(row=2, column=2).value == "Braun"
        assert ws.cell(row=2, column=8).value == 2.8
        assert ws.cell(row=2, column=9).value == "-"


# ─── PDF ──────────────────────────────────────────────────────────────────────

class TestPdfExport:

    def test_wechselplan_pdf(self, tmp_path: Path, demo_plan, demo_data):
        out = tmp_path / "wechselplan.pdf"
        PdfExporter(demo_plan, demo_data, "Test-Berufskolleg").export_wechselplan(out)
        assert out.exists()
        assert out.read_bytes()[:4] == b"%PDF"

    def test_turnus_dates_pdf(self, tmp_path: Path, demo_plan, demo_data):
        out = tmp_path / "sub" / "turnustage.pdf"
        PdfExporter(demo_plan, demo_data).export_turnus_dates(out)
        assert out.exists()
        assert out.read_bytes()[:4] == b"%PDF"

    def test_pdf_without_pm_assignments(self, tmp_path: Path, demo_data):
        """Fehlende Nachmittags-Zuweisungen: nur die Vormittagstabelle."""
        data = demo_data.model_copy(update={"assignments": demo_data.am_assignments})
        plan = build_plan(data)
        assert plan.pm_rows == []
        out = tmp_path / "nur_vm.pdf"
        PdfExporter(plan, data).export_wechselplan(out)
        assert out.exists()

    def test_non_latin1_names(self, tmp_path: Path, demo_data):
        """Namen außerhalb von Latin-1 brechen den Export nicht ab."""
        first = demo_data.assignments[0].model_copy(update={"teacher_last_name": "Şahin"})
        data = demo_data.model_copy(update={
            "class_name": "BFS-Ğ1",
            "assignments": [first] + demo_data.assignments[1:],
        })
        plan = build_plan(data)
        for name, export in (("wechselplan.pdf", "export_wechselplan"),
                             ("turnustage.pdf", "export_turnus_dates")):
            out = tmp_path / name
            getattr(PdfExporter(plan, data), export)(out)
            assert out.read_bytes()[:4] == b"%PDF"

    def test_long_table_breaks_pages(self, tmp_path: Path, demo_data, monkeypatch):
        """30 Lehrkräfte am Vormittag: keine Zelle reicht über den unteren Rand."""
        cells: list[tuple[int, float]] = []
        draw_cell = _WechselplanPdf.draw_cell

        def recording_draw_cell(pdf, x, y, w, h, *args, **kwargs):
            cells.append((pdf.page_no(), y + h))
            return draw_cell(pdf, x, y, w, h, *args, **kwargs)

        monkeypatch.setattr(_WechselplanPdf, "draw_cell", recording_draw_cell)
        data = demo_data.model_copy(update={"assignments": _am_teachers(30)})
        out = tmp_path / "lang.pdf"
        PdfExporter(build_plan(data), data).export_wechselplan(out)

        assert out.exists()
        assert max(bottom for _, bottom in cells) <= _PAGE_BOTTOM
        assert max(page for page, _ in cells) >= 2
