"""Datenmodell für eine Lehrer-Zuweisung pro Tageshälfte (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Period(str, Enum):
    AM = "AM"   # Vormittag
    PM = "PM"   # Nachmittag

    @property
    def label(self) -> str:
        return "Vormittag" if self is Period.AM else "Nachmittag"


class Assignment(BaseModel):
    """Eine (Lehrer, Tageshälfte)-Zuordnung einer Klasse.

    Fach, Raum und Lerninhalt werden von der Engine unverändert durchgereicht.
    Die Position in der Liste der Tageshälfte bestimmt die Rotationsspalte.
    """

    model_config = ConfigDict(populate_by_name=True)

    teacher_id: int = Field(alias="teacherId")
    teacher_first_name: str = Field("", alias="teacherFirstName")
    teacher_last_name: str = Field("", alias="teacherLastName")
    period: Period
    subject: Optional[str] = Field(None, alias="subjectName")
    room: Optional[str] = Field(None, alias="roomName")
    learning_content: Optional[str] = Field(None, alias="learningContentName")

    @property
    def teacher_name(self) -> str:
        """'Nachname Vorname' wie in den PDF-Tabellen."""
        return f"{self.teacher_last_name} {self.teacher_first_name}".strip()

    @property
    def teacher_display_name(self) -> str:
        """'NACHNAME Vorname' wie in der Excel-Gruppenliste."""
        return f"{self.teacher_last_name.upper()} {self.teacher_first_name}".strip()
