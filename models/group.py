"""Datenmodell für eine Schülergruppe (Pydantic v2)."""

from pydantic import BaseModel, Field

from models.student import Student


class Group(BaseModel):
    """Eine Gruppe von Schülern, die als Einheit durch die Turnusse rotiert.

    Die Reihenfolge in der Gruppenliste eines Plans ist die Ausgangsreihenfolge
    der Rotation (Turnus 1 = unrotiert).
    """

    id: int = Field(ge=1)          # 1-basiert, dicht pro Klasse (typisch 1–4)
    students: list[Student] = []

    @property
    def label(self) -> str:
        return f"Gruppe {self.id}"
