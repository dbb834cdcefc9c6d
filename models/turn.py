"""Datenmodell für Turnusse, ihre Unterrichtswochen und Ferien (Pydantic v2)."""

import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Week(BaseModel):
    """Eine Woche innerhalb eines Turnus."""

    model_config = ConfigDict(populate_by_name=True)

    week: str = ""                  # Anzeige-Label, z.B. "KW36"
    date: str                       # "DD.MM.YY"
    is_holiday: bool = Field(False, alias="isHoliday")

    @field_validator("date", "week", mode="before")
    @classmethod
    def _coerce_str(cls, v) -> str:
        return "" if v is None else str(v)

    @field_validator("is_holiday", mode="before")
    @classmethod
    def _coerce_bool(cls, v) -> bool:
        return bool(v)


class Turn(BaseModel):
    """Ein Turnus: benannter Kalenderabschnitt mit fester Lehrer-Gruppen-Zuordnung."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(validation_alias=AliasChoices("key", "name"))   # "TURNUS3"
    weeks: list[Week] = []
    # Vorgegebene Wochenzahl; None = gleichmäßiger Anteil der übrigen Wochen
    custom_length: Optional[int] = Field(None, alias="customLength")


class Holiday(BaseModel):
    """Ferienzeitraum; Start und Ende zählen beide als Ferientag."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    start_date: datetime.date = Field(alias="startDate")
    end_date: datetime.date = Field(alias="endDate")

    def contains(self, day: datetime.date) -> bool:
        return self.start_date <= day <= self.end_date
