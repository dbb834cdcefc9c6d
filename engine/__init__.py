"""Rotations-Engine: Turnus-Kalender, Gruppenrotation und Notendurchschnitte."""

from .turn_calendar import (
    TurnSchedule, TurnWindow, build_turns, distribute_weeks, parse_week_date,
    resolve_turn, resolve_turns,
)
from .rotation import RotationRow, assign_group, build_rotation_rows, rotate_groups
from .grades import StudentAverages, average_for, averages_for_class, format_average
from .plan import RotationPlan, TurnColumn, build_plan

__all__ = [
    "TurnSchedule",
    "TurnWindow",
    "build_turns",
    "distribute_weeks",
    "parse_week_date",
    "resolve_turn",
    "resolve_turns",
    "RotationRow",
    "assign_group",
    "build_rotation_rows",
    "rotate_groups",
    "StudentAverages",
    "average_for",
    "averages_for_class",
    "format_average",
    "RotationPlan",
    "TurnColumn",
    "build_plan",
]
