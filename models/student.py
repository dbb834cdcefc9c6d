"""Datenmodell für eine Schülerin / einen Schüler (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Student(BaseModel):
    """Ein Schüler einer Klasse. Die Engine reicht ihn nur zur Anzeige durch."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    group_id: Optional[int] = Field(None, alias="groupId")   # None = keiner Gruppe zugeordnet

    @property
    def display_name(self) -> str:
        """'Nachname, Vorname' für Listen."""
        return f"{self.last_name}, {self.first_name}"
