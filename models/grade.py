"""Datenmodelle für die Notenverwaltung (Pydantic v2)."""

from pathlib import Path
from typing import Literal, Optional, Sequence

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator,
)

from config.defaults import GRADE_VALUES
from models.student import Student

Semester = Literal["first", "second"]

# studentId → teacherId → {"first": ..., "second": ...}
GradeTable = dict[int, dict[int, dict[str, Optional[float]]]]


class GradeEntry(BaseModel):
    """Noten eines Schülers bei einer Lehrkraft für beide Halbjahre."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(alias="studentId")
    teacher_id: int = Field(alias="teacherId")
    first: Optional[float] = None
    second: Optional[float] = None

    @field_validator("first", "second")
    @classmethod
    def _check_scale(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        # Notenskala aus dem Validierungskontext, sonst die Standardskala
        scale = (info.context or {}).get("grade_values") or GRADE_VALUES
        if v is not None and v not in scale:
            raise ValueError(
                f"Ungültige Note {v}: zulässig sind {', '.join(str(g) for g in scale)}"
            )
        return v


class GradeTeacher(BaseModel):
    """Lehrkraft, die in einer Klasse Noten vergibt."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    subject: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()


class GradeBook(BaseModel):
    """Notenliste einer Klasse: Schüler, Lehrkräfte und alle Noteneinträge."""

    class_name: str
    students: list[Student] = []
    teachers: list[GradeTeacher] = []
    entries: list[GradeEntry] = []

    def table(self) -> GradeTable:
        """Baut die Tabelle studentId → teacherId → {first, second} auf."""
        result: GradeTable = {}
        for e in self.entries:
            result.setdefault(e.student_id, {})[e.teacher_id] = {
                "first": e.first,
                "second": e.second,
            }
        return result

    def grade_for(self, student_id: int, teacher_id: int,
                  semester: Semester) -> Optional[float]:
        for e in self.entries:
            if e.student_id == student_id and e.teacher_id == teacher_id:
                return getattr(e, semester)
        return None

    def sorted_students(self) -> list[Student]:
        """Schüler nach Nachname, dann Vorname."""
        return sorted(self.students, key=lambda s: (s.last_name, s.first_name))

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path,
                  grade_values: Optional[Sequence[float]] = None) -> "GradeBook":
        """Lädt eine Notenliste; Noten werden gegen ``grade_values`` geprüft.

        Ohne ``grade_values`` gilt die Standardskala GRADE_VALUES.
        """
        from models.wechselplan_data import ScheduleDataError

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            return cls.model_validate_json(
                raw, context={"grade_values": tuple(grade_values or GRADE_VALUES)}
            )
        except ValidationError as e:
            raise ScheduleDataError(f"Notenliste ungültig: {path}\n{e}") from e
