"""Notendurchschnitte pro Schüler und Halbjahr."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel

from models.grade import GradeBook, GradeTable

SEMESTERS = ("first", "second")


class StudentAverages(BaseModel):
    """Durchschnitt eines Schülers für beide Halbjahre (None = keine Noten)."""

    student_id: int
    first: Optional[float] = None
    second: Optional[float] = None


def average_for(
    student_id: int, semester: str, grade_table: GradeTable, decimals: int = 1
) -> Optional[float]:
    """Arithmetisches Mittel aller vorhandenen Noten eines Halbjahres.

    Fehlende Einträge (None) werden ignoriert. Gerundet wird kaufmännisch
    (0,05 → aufrunden) auf ``decimals`` Nachkommastellen, also 2,75 → 2,8.
    Ohne Noten: None.
    """
    if semester not in SEMESTERS:
        raise ValueError(f"Unbekanntes Halbjahr '{semester}' (erwartet: first, second)")

    values = [
        Decimal(str(entry[semester]))
        for entry in grade_table.get(student_id, {}).values()
        if entry and entry.get(semester) is not None
    ]
    if not values:
        return None

    mean = sum(values) / len(values)
    step = Decimal(1).scaleb(-decimals)
    return float(mean.quantize(step, rounding=ROUND_HALF_UP))


def averages_for_class(grade_book: GradeBook, decimals: int = 1) -> dict[int, StudentAverages]:
    """Durchschnitte für alle Schüler einer Notenliste."""
    table = grade_book.table()
    return {
        s.id: StudentAverages(
            student_id=s.id,
            first=average_for(s.id, "first", table, decimals),
            second=average_for(s.id, "second", table, decimals),
        )
        for s in grade_book.students
    }


def format_average(value: Optional[float], decimals: int = 1) -> str:
    """'2,8' mit deutschem Dezimalkomma, '-' wenn kein Durchschnitt vorliegt."""
    if value is None:
        return "-"
    return f"{value:.{decimals}f}".replace(".", ",")
