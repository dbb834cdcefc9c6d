"""Renderer für die Terminal-Übersicht (Rich).

Wird von ``main.py overview`` und ``main.py grades`` verwendet.
"""

from typing import TYPE_CHECKING

from rich import box
from rich.table import Table

from export.helpers import EMPTY_CELL, column_headers, rotation_table_rows

if TYPE_CHECKING:
    from engine.plan import RotationPlan
    from models.assignment import Period
    from models.grade import GradeBook


def render_rotation_table(plan: "RotationPlan", period: "Period", time_range: str = "") -> Table:
    """Rich-Tabelle Lehrkraft × Turnus für eine Tageshälfte.

    Leere Zellen werden als '—' dargestellt.
    """
    title = f"{plan.weekday_name} {period.label}"
    if time_range:
        title += f": {time_range}"

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("Lehrkraft", style="bold")
    table.add_column("Fach")
    table.add_column("Lerninhalt")
    table.add_column("Raum")
    for header in column_headers(plan.columns):
        table.add_column(header, justify="center")

    rows = rotation_table_rows(plan, plan.rows_for(period), empty=EMPTY_CELL)
    for cells in rows[:-1]:
        table.add_row(*cells)
    table.add_section()
    table.add_row(*rows[-1], style="dim")
    return table


def render_turn_table(plan: "RotationPlan") -> Table:
    """Übersicht der Turnusse: Datumsfenster, Kalenderwochen, Unterrichtswochen."""
    table = Table(title="Turnusse", box=box.ROUNDED)
    table.add_column("Turnus", style="bold")
    table.add_column("Name")
    table.add_column("Beginn")
    table.add_column("Ende")
    table.add_column("KW")
    table.add_column("Wochen", justify="right")
    table.add_column("Vorgabe", justify="right")
    for c in plan.columns:
        w = c.window
        table.add_row(
            c.title,
            c.key,
            w.week_start_monday() or EMPTY_CELL,
            w.week_end_sunday() or EMPTY_CELL,
            w.kw_range or EMPTY_CELL,
            str(w.week_count),
            str(c.custom_length) if c.custom_length else "",
        )
    return table


def grade_rows(grade_book: "GradeBook", decimals: int = 1) -> list[list[str]]:
    """Zeilen [Nr., Name, Ø 1. Hj., Ø 2. Hj.] in alphabetischer Reihenfolge."""
    from engine.grades import averages_for_class, format_average

    averages = averages_for_class(grade_book, decimals)
    rows: list[list[str]] = []
    for nr, student in enumerate(grade_book.sorted_students(), 1):
        avg = averages[student.id]
        rows.append([
            str(nr),
            student.display_name,
            format_average(avg.first, decimals),
            format_average(avg.second, decimals),
        ])
    return rows


def render_grade_table(grade_book: "GradeBook", decimals: int = 1) -> Table:
    """Rich-Tabelle der Notendurchschnitte einer Klasse."""
    table = Table(title=f"Notenübersicht {grade_book.class_name}", box=box.ROUNDED)
    table.add_column("Nr.", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Ø 1. Halbjahr", justify="center")
    table.add_column("Ø 2. Halbjahr", justify="center")
    for row in grade_rows(grade_book, decimals):
        table.add_row(*row)
    return table
