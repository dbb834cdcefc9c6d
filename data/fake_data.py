"""Testdaten-Generator für den Wechselplan-Generator.

Erzeugt einen reproduzierbaren Wechselplan (Gruppen, Lehrer-Zuweisungen,
Turnusse mit Ferienwochen) und eine passende Notenliste.

Die Turnusse werden wie im echten Betrieb aus Schuljahr, Wochentag und
Ferien berechnet (build_turns); Turnus 1 hat eine feste Länge.

Absichtliche Sonderfälle:
  1. Herbst-, Weihnachts- und Osterferien fallen mitten in Turnusse.
  2. Wochen innerhalb eines Turnus sind nicht chronologisch gespeichert.
  3. Einzelne Noten fehlen; ein Schüler hat im 2. Halbjahr gar keine Noten.
"""

import random
from datetime import date
from typing import Optional

from config.defaults import default_config
from config.schema import WechselplanConfig
from models.assignment import Assignment, Period
from models.grade import GradeBook, GradeEntry, GradeTeacher
from models.group import Group
from models.student import Student
from engine.turn_calendar import TurnSchedule, build_turns
from models.turn import Holiday, Turn
from models.wechselplan_data import ScheduleTime, WechselplanData

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Bernd", "Christian", "Dieter", "Finn", "Hans", "Jonas",
    "Klaus", "Lukas", "Markus", "Noah", "Paul", "Stefan", "Tobias", "Yusuf",
    "Anna", "Birgit", "Clara", "Emma", "Hannah", "Iris", "Lena", "Maria",
    "Mia", "Sandra", "Sophie", "Tanja", "Ute", "Vera", "Zoe",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hartmann", "Lange",
]

# ─── Ferien NRW 2024/25 ───────────────────────────────────────────────────────

DEFAULT_HOLIDAYS: list[Holiday] = [
    Holiday(name="Herbstferien", start_date=date(2024, 10, 14), end_date=date(2024, 10, 26)),
    Holiday(name="Weihnachtsferien", start_date=date(2024, 12, 23), end_date=date(2025, 1, 6)),
    Holiday(name="Osterferien", start_date=date(2025, 4, 14), end_date=date(2025, 4, 26)),
    Holiday(name="Pfingstferien", start_date=date(2025, 6, 10), end_date=date(2025, 6, 10)),
]

# ─── Werkstatt-Fächer (Fach, Raum, Lerninhalt) ────────────────────────────────

_WORKSHOPS: list[tuple[str, str, str]] = [
    ("Metalltechnik", "W101", "Feilen und Bohren"),
    ("Elektrotechnik", "W102", "Grundschaltungen"),
    ("Holztechnik", "W103", "Verbindungen"),
    ("Informatik", "R204", "Netzwerke"),
    ("Farbtechnik", "W105", "Oberflächen"),
    ("Bautechnik", "W106", "Mauerwerk"),
    ("Kfz-Technik", "W107", "Motorenkunde"),
    ("Sanitärtechnik", "W108", "Rohrverbindungen"),
]


class FakeDataGenerator:
    """Erzeugt reproduzierbare Demo-Daten für einen Wechselplan."""

    def __init__(self, config: WechselplanConfig | None = None, seed: int = 42,
                 num_groups: int = 4, students_per_group: int = 6,
                 school_year_start: date = date(2024, 9, 2),
                 school_year_end: date = date(2025, 7, 11),
                 holidays: Optional[list[Holiday]] = None,
                 custom_lengths: Optional[dict[int, int]] = None):
        self.config = config or default_config()
        self.rng = random.Random(seed)
        self.num_groups = num_groups
        self.students_per_group = students_per_group
        self.school_year_start = school_year_start
        self.school_year_end = school_year_end
        self.holidays = DEFAULT_HOLIDAYS if holidays is None else holidays
        self.custom_lengths = {1: 4} if custom_lengths is None else custom_lengths
        self.turn_schedule: Optional[TurnSchedule] = None

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def generate(self, class_name: str = "BFS-24a") -> WechselplanData:
        """Erzeugt einen vollständigen Wechselplan-Datensatz."""
        weekday = self.config.rotation.default_weekday
        return WechselplanData(
            class_name=class_name,
            weekday=weekday,
            groups=self._make_groups(),
            assignments=self._make_assignments(),
            turns=self._make_turns(weekday),
            class_head=f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}",
            class_lead=f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}",
            schedule_times=[
                ScheduleTime(start_time="07:45", end_time="09:15", period=Period.AM, hours=2),
                ScheduleTime(start_time="09:35", end_time="11:05", period=Period.AM, hours=2),
                ScheduleTime(start_time="12:00", end_time="13:30", period=Period.PM, hours=2),
                ScheduleTime(start_time="13:45", end_time="15:15", period=Period.PM, hours=2),
            ],
            additional_info="Sicherheitsunterweisung vor dem ersten Werkstatttag.",
        )

    def generate_grades(self, data: WechselplanData) -> GradeBook:
        """Erzeugt eine Notenliste zu den Schülern und Lehrkräften des Plans."""
        students = [s for g in data.groups for s in g.students]
        teachers = [
            GradeTeacher(id=a.teacher_id, first_name=a.teacher_first_name,
                         last_name=a.teacher_last_name, subject=a.subject)
            for a in data.assignments
        ]
        entries: list[GradeEntry] = []
        scale = {"grade_values": tuple(self.config.grades.allowed_values)}
        no_second = students[-1].id if students else None
        for s in students:
            for t in teachers:
                first = self._maybe_grade()
                second = None if s.id == no_second else self._maybe_grade()
                entries.append(GradeEntry.model_validate(
                    {"student_id": s.id, "teacher_id": t.id, "first": first, "second": second},
                    context=scale,
                ))
        return GradeBook(class_name=data.class_name, students=students,
                         teachers=teachers, entries=entries)

    # ─── Bausteine ────────────────────────────────────────────────────────────

    def _make_groups(self) -> list[Group]:
        groups: list[Group] = []
        student_id = 1
        for gid in range(1, self.num_groups + 1):
            students = []
            for _ in range(self.students_per_group):
                students.append(Student(
                    id=student_id,
                    first_name=self.rng.choice(_FIRST_NAMES),
                    last_name=self.rng.choice(_LAST_NAMES),
                    group_id=gid,
                ))
                student_id += 1
            groups.append(Group(id=gid, students=students))
        return groups

    def _make_assignments(self) -> list[Assignment]:
        workshops = self.rng.sample(_WORKSHOPS, k=min(len(_WORKSHOPS), self.num_groups * 2))
        assignments: list[Assignment] = []
        for idx, (subject, room, content) in enumerate(workshops):
            period = Period.AM if idx < self.num_groups else Period.PM
            assignments.append(Assignment(
                teacher_id=idx + 1,
                teacher_first_name=self.rng.choice(_FIRST_NAMES),
                teacher_last_name=self.rng.choice(_LAST_NAMES),
                period=period,
                subject=subject,
                room=room,
                learning_content=content,
            ))
        return assignments

    def _make_turns(self, weekday: int) -> list[Turn]:
        """Verteilt die Unterrichtstage des Schuljahres auf max_turns Turnusse."""
        self.turn_schedule = build_turns(
            self.school_year_start, self.school_year_end, weekday,
            self.config.rotation.max_turns,
            holidays=self.holidays,
            custom_lengths=self.custom_lengths,
        )
        turns = self.turn_schedule.turns
        if len(turns) > 1:
            # Unsortiert gespeichert, wie es Altdaten häufig sind
            self.rng.shuffle(turns[1].weeks)
        return turns

    def _maybe_grade(self) -> float | None:
        if self.rng.random() < 0.15:
            return None
        return self.rng.choice(self.config.grades.allowed_values)

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: WechselplanData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        num_students = sum(len(g.students) for g in data.groups)
        weeks = sum(len(t.weeks) for t in data.turns)
        table.add_row("Gruppen", str(len(data.groups)), f"{num_students} Schüler")
        table.add_row("Lehrkräfte Vormittag", str(len(data.am_assignments)), "")
        table.add_row("Lehrkräfte Nachmittag", str(len(data.pm_assignments)), "")
        table.add_row("Turnusse", str(len(data.turns)),
                      f"{weeks} Unterrichtswochen, {len(self.holidays)} Ferienzeiträume")
        console.print(table)
