"""WechselplanData: vollständiger Datensatz eines Wechselplans (Pydantic v2).

Die Turnusdaten kommen aus der Schulverwaltung historisch als lose
Mapping-of-Mappings (``{"TURNUS1": {"weeks": [...]}}``). Sie werden hier einmal
beim Laden in typisierte ``Turn``/``Week``-Objekte überführt; die Engine sieht
nur noch diese.
"""

import logging
import re
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.assignment import Assignment, Period
from models.group import Group
from models.turn import Turn

logger = logging.getLogger(__name__)


class ScheduleDataError(Exception):
    """Fehler beim Laden oder Validieren eines Wechselplan-Datensatzes."""


class ScheduleTime(BaseModel):
    """Ein Unterrichtszeitblock einer Tageshälfte."""

    model_config = ConfigDict(populate_by_name=True)

    start_time: str = Field(alias="startTime")   # "HH:MM"
    end_time: str = Field(alias="endTime")
    period: Period
    hours: Optional[int] = None


def turn_sort_key(key: str) -> tuple:
    """Sortierschlüssel für Turnus-Namen: Zahlen numerisch ("TURNUS10" nach "TURNUS9")."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in re.split(r"(\d+)", key) if part
    )


def normalize_turns(raw: Any) -> list[dict]:
    """Überführt das Legacy-Mapping {name: {weeks: [...]}} in eine Liste von Turn-Dicts.

    Einträge, die keine Mappings sind, werden übersprungen.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, dict):
        raise ValueError(f"Turnusdaten müssen Liste oder Mapping sein, nicht {type(raw).__name__}")

    result: list[dict] = []
    for name, turn_data in raw.items():
        if not isinstance(turn_data, dict):
            logger.debug(f"Turnus '{name}' übersprungen: kein Mapping")
            continue
        weeks = turn_data.get("weeks")
        result.append({
            "key": str(name),
            "weeks": weeks if isinstance(weeks, list) else [],
            "custom_length": turn_data.get("customLength", turn_data.get("custom_length")),
        })
    return result


class WechselplanData(BaseModel):
    """Alle Eingaben eines Wechselplans: Gruppen, Zuweisungen, Turnusse."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(alias="className")
    weekday: int = Field(1, ge=0, le=6, alias="selectedWeekday")   # 0=So, 1=Mo, ...
    groups: list[Group] = []
    assignments: list[Assignment] = []
    turns: list[Turn] = []
    schedule_times: list[ScheduleTime] = Field(default=[], alias="scheduleTimes")
    additional_info: Optional[str] = Field(None, alias="additionalInfo")
    class_head: Optional[str] = Field(None, alias="classHead")    # Klassenleitung
    class_lead: Optional[str] = Field(None, alias="classLead")    # Bildungsgangleitung

    @field_validator("turns", mode="before")
    @classmethod
    def _normalize_turns(cls, v: Any) -> list[dict]:
        return normalize_turns(v)

    @field_validator("class_head", "class_lead", mode="before")
    @classmethod
    def _person_name(cls, v: Any) -> Optional[str]:
        # Schulverwaltung liefert {"firstName": ..., "lastName": ...}
        if isinstance(v, dict):
            name = f"{v.get('firstName') or ''} {v.get('lastName') or ''}".strip()
            return name or None
        return v

    # ─── Sichten ───

    @property
    def am_assignments(self) -> list[Assignment]:
        return [a for a in self.assignments if a.period is Period.AM]

    @property
    def pm_assignments(self) -> list[Assignment]:
        return [a for a in self.assignments if a.period is Period.PM]

    def assignments_for(self, period: Period) -> list[Assignment]:
        return self.am_assignments if period is Period.AM else self.pm_assignments

    def sorted_turns(self, max_turns: Optional[int] = None) -> list[Turn]:
        """Turnusse nach Namen sortiert, optional auf max_turns begrenzt."""
        ordered = sorted(self.turns, key=lambda t: turn_sort_key(t.key))
        if max_turns is not None:
            ordered = ordered[:max_turns]
        return ordered

    def period_time_range(self, period: Period) -> str:
        """'HH:MM - HH:MM' von der ersten bis zur letzten Zeit der Tageshälfte."""
        times = [t for t in self.schedule_times if t.period is period]
        if not times:
            return ""
        return f"{times[0].start_time} - {times[-1].end_time}"

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        num_students = sum(len(g.students) for g in self.groups)
        return "\n".join([
            f"Klasse: {self.class_name}",
            f"Gruppen: {len(self.groups)} ({num_students} Schüler)",
            f"Lehrkräfte: {len(self.am_assignments)} Vormittag, "
            f"{len(self.pm_assignments)} Nachmittag",
            f"Turnusse: {len(self.turns)}",
        ])

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Speichert den Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "WechselplanData":
        """Lädt einen Datensatz aus einer JSON-Datei und validiert ihn."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise ScheduleDataError(f"Wechselplan-Daten ungültig: {path}\n{e}") from e
