"""Turnus-Kalender: Datumsfenster und Unterrichtswochen eines Turnus.

Ferienwochen werden verworfen, die restlichen Wochen chronologisch sortiert.
Datumsangaben haben das Format ``TT.MM.JJ``; zweistellige Jahre liegen immer
nach 2000. Nicht lesbare Daten führen nie zu einer Exception: sie gelten beim
Sortieren als "gleich" zu jeder anderen Woche und bleiben dank stabiler
Sortierung an ihrer relativen Position.
"""

import logging
from datetime import date, timedelta
from functools import cmp_to_key
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel

from config.defaults import weekday_abbr
from models.turn import Holiday, Turn, Week

logger = logging.getLogger(__name__)


# ─── Datums-Parsing ───────────────────────────────────────────────────────────

def _clean(text: str) -> str:
    """Entfernt führendes '- ' und Leerraum (Altdaten enthalten '- 01.09.24')."""
    text = (text or "").strip()
    if text.startswith("-"):
        text = text[1:].strip()
    return text


def parse_week_date(text: str) -> Optional[date]:
    """Parst 'TT.MM.JJ' (oder 'TT.MM.JJJJ') zu einem date.

    Zweistellige Jahre werden als 2000 + JJ gelesen. Gibt None zurück,
    wenn ein Bestandteil fehlt, nicht numerisch ist oder kein gültiges Datum ergibt.
    """
    parts = _clean(text).split(".")
    if len(parts) < 3:
        return None
    day_s, month_s, year_s = parts[0].strip(), parts[1].strip(), parts[2].strip()
    if not (day_s.isdigit() and month_s.isdigit() and year_s.isdigit()):
        return None
    year = int(year_s)
    if year < 100:
        year += 2000
    try:
        return date(year, int(month_s), int(day_s))
    except ValueError:
        return None


def _compare_weeks(a: Week, b: Week) -> int:
    da, db = parse_week_date(a.date), parse_week_date(b.date)
    if da is None or db is None:
        return 0
    return (da > db) - (da < db)


def sort_weeks(weeks: Iterable[Week]) -> list[Week]:
    """Sortiert Wochen aufsteigend nach Datum; unlesbare Daten gelten als gleich."""
    weeks = list(weeks)
    for w in weeks:
        if parse_week_date(w.date) is None:
            logger.debug(f"Unlesbares Wochendatum '{w.date}' – wird beim Sortieren nicht verglichen")
    return sorted(weeks, key=cmp_to_key(_compare_weeks))


def calendar_week(d: date) -> int:
    """ISO-8601-Kalenderwoche (1–53)."""
    return d.isocalendar()[1]


def expand_year(text: str) -> str:
    """'01.09.24' → '01.09.2024' (für Export-Spalten). Andere Formate unverändert."""
    cleaned = _clean(text)
    parts = cleaned.split(".")
    if len(parts) == 3 and len(parts[2]) == 2:
        return f"{parts[0]}.{parts[1]}.20{parts[2]}"
    return cleaned


def format_date_with_weekday(text: str) -> str:
    """'09.09.24' → 'Mo - 09.09'. Nicht lesbare Eingaben werden unverändert zurückgegeben."""
    d = parse_week_date(text)
    if d is None:
        return text
    return _format_weekday_date(d)


def _format_weekday_date(d: date) -> str:
    # date.weekday(): 0=Montag; die Anzeige-Tabelle zählt ab Sonntag
    return f"{weekday_abbr((d.weekday() + 1) % 7)} - {d.day:02d}.{d.month:02d}"


# ─── Turnus-Fenster ───────────────────────────────────────────────────────────

class TurnWindow(BaseModel):
    """Ergebnis der Turnus-Auflösung: erste/letzte Unterrichtswoche und Wochenzahl.

    ``start``/``end`` sind die Datumsangaben so, wie sie gespeichert sind.
    Ein leeres Fenster (nur Ferienwochen) hat start=end=None und week_count=0.
    """

    start: Optional[str] = None
    end: Optional[str] = None
    week_count: int = 0
    weeks: list[Week] = []

    @classmethod
    def empty(cls) -> "TurnWindow":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.week_count == 0

    @property
    def start_date(self) -> Optional[date]:
        return parse_week_date(self.start) if self.start else None

    @property
    def end_date(self) -> Optional[date]:
        return parse_week_date(self.end) if self.end else None

    @property
    def calendar_weeks(self) -> tuple[Optional[int], Optional[int]]:
        sd, ed = self.start_date, self.end_date
        return (
            calendar_week(sd) if sd else None,
            calendar_week(ed) if ed else None,
        )

    @property
    def kw_range(self) -> str:
        """'KW 36-38', 'KW 36' oder '' wenn kein Datum lesbar ist."""
        start_kw, end_kw = self.calendar_weeks
        if start_kw and end_kw:
            return f"KW {start_kw}-{end_kw}"
        if start_kw or end_kw:
            return f"KW {start_kw or end_kw}"
        return ""

    def week_start_monday(self) -> str:
        """Montag der ersten Unterrichtswoche als 'Mo - TT.MM' (oder '')."""
        sd = self.start_date
        if sd is None:
            return ""
        return _format_weekday_date(sd - timedelta(days=sd.weekday()))

    def week_end_sunday(self) -> str:
        """Sonntag der letzten Unterrichtswoche als 'So - TT.MM' (oder '')."""
        ed = self.end_date
        if ed is None:
            return ""
        return _format_weekday_date(ed + timedelta(days=6 - ed.weekday()))

    def format_range(self) -> str:
        """'01.09. - 15.09.' für Spaltenköpfe; '—' wenn der Turnus leer ist."""
        if self.is_empty:
            return "—"
        sd, ed = self.start_date, self.end_date
        start = f"{sd.day:02d}.{sd.month:02d}." if sd else self.start
        end = f"{ed.day:02d}.{ed.month:02d}." if ed else self.end
        return f"{start} - {end}"


def resolve_turn(weeks: Iterable[Week]) -> TurnWindow:
    """Verwirft Ferienwochen, sortiert chronologisch und bestimmt das Datumsfenster.

    Reine Funktion: die Eingabeliste wird nicht verändert.
    """
    remaining = sort_weeks(w for w in weeks if not w.is_holiday)
    if not remaining:
        return TurnWindow.empty()
    return TurnWindow(
        start=remaining[0].date,
        end=remaining[-1].date,
        week_count=len(remaining),
        weeks=remaining,
    )


def resolve_turns(
    turns: Iterable[Turn], max_turns: Optional[int] = None
) -> list[tuple[Turn, TurnWindow]]:
    """Löst die Turnusse in der gegebenen Reihenfolge auf (optional begrenzt)."""
    ordered = list(turns)
    if max_turns is not None:
        ordered = ordered[:max_turns]
    return [(turn, resolve_turn(turn.weeks)) for turn in ordered]


# ─── Turnus-Aufteilung eines Schuljahres ──────────────────────────────────────

class TurnSchedule(BaseModel):
    """Ergebnis von build_turns: Turnusse plus Wochenbilanz."""

    turns: list[Turn]
    available_weeks: int          # Unterrichtstage im Schuljahr (ohne Ferien)
    assigned_weeks: int           # Summe der Turnuslängen

    @property
    def week_mismatch(self) -> Optional[str]:
        """Warnung, wenn die Turnuslängen nicht genau aufgehen, sonst None."""
        if self.assigned_weeks < self.available_weeks:
            return (
                f"Zugewiesene Wochen ({self.assigned_weeks}) sind weniger als die "
                f"verfügbaren Wochen ({self.available_weeks}). Bitte alle Wochen verteilen."
            )
        if self.assigned_weeks > self.available_weeks:
            return (
                f"Zugewiesene Wochen ({self.assigned_weeks}) sind mehr als die "
                f"verfügbaren Wochen ({self.available_weeks}). Bitte Turnuslängen kürzen."
            )
        return None


def first_rotation_day(start: date, weekday: int) -> date:
    """Erster Tag mit dem Wochentag ``weekday`` (0=Sonntag) ab ``start``."""
    return start + timedelta(days=(weekday - (start.weekday() + 1)) % 7)


def rotation_dates(start: date, end: date, weekday: int,
                   holidays: Iterable[Holiday] = ()) -> list[date]:
    """Alle Unterrichtstage am Wochentag zwischen start und end, ohne Ferientage."""
    holidays = list(holidays)
    dates: list[date] = []
    day = first_rotation_day(start, weekday)
    while day <= end:
        if not any(h.contains(day) for h in holidays):
            dates.append(day)
        day += timedelta(weeks=1)
    return dates


def distribute_weeks(total: int, count: int,
                     custom_lengths: Optional[Mapping[int, int]] = None) -> list[int]:
    """Wochen pro Turnus: Vorgaben zuerst, der Rest gleichmäßig, vorne aufgerundet.

    ``custom_lengths`` ist nach Turnusnummer (1-basiert) indiziert; Werte <= 0
    gelten als nicht gesetzt. Reichen die Wochen nicht, bekommen die übrigen
    Turnusse 0 Wochen.
    """
    custom_lengths = custom_lengths or {}
    lengths = [0] * count
    weeks_left, turns_left = total, count
    for i in range(count):
        length = custom_lengths.get(i + 1) or 0
        if length > 0:
            lengths[i] = length
            weeks_left -= length
            turns_left -= 1

    for i in range(count):
        if lengths[i] == 0 and turns_left > 0:
            if weeks_left > 0:
                share = weeks_left // turns_left + (1 if weeks_left % turns_left else 0)
            else:
                share = 0
            lengths[i] = share
            weeks_left -= share
            turns_left -= 1
    return lengths


def build_turns(start: date, end: date, weekday: int, count: int,
                holidays: Iterable[Holiday] = (),
                custom_lengths: Optional[Mapping[int, int]] = None) -> TurnSchedule:
    """Teilt die Unterrichtstage eines Schuljahres in ``count`` Turnusse auf.

    Die Turnusse bekommen die Tage der Reihe nach; Wochen werden als
    'KW<n>' / 'TT.MM.JJ' beschriftet. Ferientage tauchen nicht auf.
    """
    dates = rotation_dates(start, end, weekday, holidays)
    lengths = distribute_weeks(len(dates), count, custom_lengths)
    custom_lengths = custom_lengths or {}

    turns: list[Turn] = []
    pos = 0
    for i, length in enumerate(lengths):
        chunk = dates[pos:pos + length]
        pos += length
        fixed = custom_lengths.get(i + 1) or 0
        turns.append(Turn(
            key=f"TURNUS{i + 1}",
            weeks=[
                Week(week=f"KW{calendar_week(d)}", date=d.strftime("%d.%m.%y"))
                for d in chunk
            ],
            custom_length=fixed if fixed > 0 else None,
        ))

    schedule = TurnSchedule(turns=turns, available_weeks=len(dates),
                            assigned_weeks=sum(lengths))
    logger.debug(
        f"Turnusse erzeugt: {count} Turnusse, Längen {lengths}, "
        f"{len(dates)} verfügbare Wochen"
    )
    if schedule.week_mismatch:
        logger.warning(schedule.week_mismatch)
    return schedule
