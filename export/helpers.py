"""Gemeinsame Hilfsfunktionen für Übersicht, Excel- und PDF-Export."""

from datetime import date
from typing import Optional

from engine.plan import RotationPlan, TurnColumn
from engine.rotation import RotationRow
from models.group import Group

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header":  "4472C4",
    "am":      "DDEBF7",
    "pm":      "FCE4D6",
    "footer":  "EDEDED",
    "empty":   "F5F5F5",
    "grade":   "E2EFDA",
}

# Hintergrundfarben für Gruppen 1..n (zyklisch)
GROUP_COLORS: list[str] = ["B3D4FF", "FFF2B3", "B3FFB3", "FFB3E6", "D4B3FF", "FFD4B3"]

EMPTY_CELL = "—"
WEEKS_FOOTER_LABEL = "U.-Wochen"


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def group_color(group: Optional[Group]) -> str:
    """Hintergrundfarbe einer Gruppe; leere Zellen grau."""
    if group is None:
        return COLORS["empty"]
    return GROUP_COLORS[(group.id - 1) % len(GROUP_COLORS)]


def format_group_cell(group: Optional[Group], empty: str = "") -> str:
    """Gruppennummer als Zelleninhalt (oder ``empty``)."""
    return str(group.id) if group is not None else empty


# ─── Tabellenzeilen ───────────────────────────────────────────────────────────

def row_header_cells(row: RotationRow) -> list[str]:
    """[Lehrkraft, Fach, Lerninhalt, Raum] einer Rotationszeile."""
    a = row.assignment
    return [
        a.teacher_name,
        a.subject or "",
        a.learning_content or "",
        a.room or "",
    ]


def rotation_table_rows(
    plan: RotationPlan, rows: list[RotationRow], empty: str = ""
) -> list[list[str]]:
    """Tabellenzeilen einer Tageshälfte inkl. Fußzeile mit Unterrichtswochen.

    Jede Zeile: [Lehrkraft, Fach, Lerninhalt, Raum, Gruppe T1, Gruppe T2, ...]
    Fußzeile:   ['', '', '', 'U.-Wochen', '4 UW', '3 UW', ...]
    """
    table = [
        row_header_cells(row) + [format_group_cell(g, empty) for g in row.groups]
        for row in rows
    ]
    table.append(["", "", "", WEEKS_FOOTER_LABEL] + [c.week_label for c in plan.columns])
    return table


def column_headers(columns: list[TurnColumn]) -> list[str]:
    """'Turnus n' mit Datumsbereich in der zweiten Zeile."""
    return [f"{c.title}\n{c.window.format_range()}" for c in columns]
