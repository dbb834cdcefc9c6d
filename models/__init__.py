from models.student import Student
from models.group import Group
from models.assignment import Assignment, Period
from models.turn import Holiday, Turn, Week
from models.grade import GradeBook, GradeEntry, GradeTeacher, GradeTable
from models.wechselplan_data import ScheduleDataError, ScheduleTime, WechselplanData

__all__ = [
    "Student",
    "Group",
    "Assignment",
    "Period",
    "Holiday",
    "Turn",
    "Week",
    "GradeBook",
    "GradeEntry",
    "GradeTeacher",
    "GradeTable",
    "ScheduleDataError",
    "ScheduleTime",
    "WechselplanData",
]
