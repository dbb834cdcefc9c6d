"""Rotation: welche Gruppe hat welche Lehrkraft in welchem Turnus.

Im Turnus mit Index k wird die Gruppenliste um k Positionen nach links
rotiert; die Lehrkraft an Position i der Tageshälfte bekommt die Gruppe an
Position i der rotierten Liste. Die Rotation wird für jeden Turnus neu aus
der Ausgangsliste berechnet.
"""

from typing import Optional, Sequence

from pydantic import BaseModel

from models.assignment import Assignment
from models.group import Group


class RotationRow(BaseModel):
    """Eine Tabellenzeile: eine Lehrkraft und ihre Gruppe pro Turnus."""

    assignment: Assignment
    groups: list[Optional[Group]]   # eine Zelle pro Turnus, None = leer

    def group_ids(self) -> list[Optional[int]]:
        return [g.id if g is not None else None for g in self.groups]


def rotate_groups(groups: Sequence[Group], turn_index: int) -> list[Group]:
    """Gibt eine um turn_index nach links rotierte Kopie zurück."""
    if not groups:
        return []
    k = turn_index % len(groups)
    return list(groups[k:]) + list(groups[:k])


def assign_group(
    groups: Sequence[Group], teacher_index: int, turn_index: int
) -> Optional[Group]:
    """Gruppe der Lehrkraft an Position teacher_index im Turnus turn_index.

    None bei leerer Gruppenliste oder wenn teacher_index außerhalb liegt.
    """
    if not groups or teacher_index < 0 or teacher_index >= len(groups):
        return None
    return rotate_groups(groups, turn_index)[teacher_index]


def build_rotation_rows(
    groups: Sequence[Group],
    assignments: Sequence[Assignment],
    turn_count: int,
) -> list[RotationRow]:
    """Baut das komplette Raster Lehrkraft × Turnus für eine Tageshälfte."""
    return [
        RotationRow(
            assignment=assignment,
            groups=[
                assign_group(groups, teacher_idx, turn_idx)
                for turn_idx in range(turn_count)
            ],
        )
        for teacher_idx, assignment in enumerate(assignments)
    ]
