"""RotationPlan: gemeinsame Aufbereitung für Übersicht, PDF- und Excel-Export.

Alle Ausgaben rufen ``build_plan`` auf, statt Rotation und Turnus-Fenster
selbst zu berechnen.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from config.defaults import MAX_TURNS, weekday_name
from engine.rotation import RotationRow, build_rotation_rows
from engine.turn_calendar import TurnWindow, resolve_turns
from models.assignment import Period
from models.wechselplan_data import WechselplanData

logger = logging.getLogger(__name__)


class TurnColumn(BaseModel):
    """Eine Turnus-Spalte: Position (0-basiert), Name und aufgelöstes Datumsfenster."""

    index: int
    key: str
    window: TurnWindow
    custom_length: Optional[int] = None   # feste Vorgabe aus der Turnusplanung

    @property
    def title(self) -> str:
        return f"Turnus {self.index + 1}"

    @property
    def week_label(self) -> str:
        """'<n> UW' (Unterrichtswochen) oder '' bei leerem Turnus."""
        return f"{self.window.week_count} UW" if self.window.week_count > 0 else ""


class RotationPlan(BaseModel):
    """Berechneter Wechselplan einer Klasse."""

    class_name: str
    weekday: int
    columns: list[TurnColumn]
    am_rows: list[RotationRow]
    pm_rows: list[RotationRow]

    @property
    def weekday_name(self) -> str:
        return weekday_name(self.weekday)

    def rows_for(self, period: Period) -> list[RotationRow]:
        return self.am_rows if period is Period.AM else self.pm_rows

    def week_counts(self) -> list[int]:
        return [c.window.week_count for c in self.columns]


def build_plan(data: WechselplanData, max_turns: Optional[int] = MAX_TURNS) -> RotationPlan:
    """Berechnet Turnus-Spalten und Gruppenraster für beide Tageshälften."""
    turns = data.sorted_turns(max_turns)
    columns = [
        TurnColumn(index=idx, key=turn.key, window=window,
                   custom_length=turn.custom_length)
        for idx, (turn, window) in enumerate(resolve_turns(turns))
    ]
    turn_count = len(columns)

    am_rows = build_rotation_rows(data.groups, data.am_assignments, turn_count)
    pm_rows = build_rotation_rows(data.groups, data.pm_assignments, turn_count)

    logger.debug(
        f"Wechselplan {data.class_name}: {turn_count} Turnusse, "
        f"{len(am_rows)} VM- / {len(pm_rows)} NM-Lehrkräfte, {len(data.groups)} Gruppen"
    )
    if len(data.turns) > turn_count:
        logger.info(
            f"Wechselplan {data.class_name}: {len(data.turns) - turn_count} "
            f"Turnusse über dem Limit von {max_turns} werden ignoriert"
        )

    return RotationPlan(
        class_name=data.class_name,
        weekday=data.weekday,
        columns=columns,
        am_rows=am_rows,
        pm_rows=pm_rows,
    )
