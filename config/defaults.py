from config.schema import (
    ExportConfig,
    GradeScaleConfig,
    RotationConfig,
    WechselplanConfig,
)


# Zulässige Notenwerte (1 = sehr gut .. 5 = mangelhaft, halbe Schritte)
GRADE_VALUES: tuple[float, ...] = (1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 5.0)

# Wochentage nach JavaScript-/Schulverwaltungs-Konvention: 0 = Sonntag
WEEKDAY_NAMES: tuple[str, ...] = (
    "Sonntag", "Montag", "Dienstag", "Mittwoch",
    "Donnerstag", "Freitag", "Samstag",
)
WEEKDAY_ABBR: tuple[str, ...] = ("So", "Mo", "Di", "Mi", "Do", "Fr", "Sa")

# Obergrenze Turnusse im PDF-Layout
MAX_TURNS = 8


def weekday_name(weekday: int) -> str:
    """Deutscher Name des Wochentags (0=Sonntag), sonst 'Unbekannt'."""
    if 0 <= weekday < len(WEEKDAY_NAMES):
        return WEEKDAY_NAMES[weekday]
    return "Unbekannt"


def weekday_abbr(weekday: int) -> str:
    """Abgekürzter Wochentag (So, Mo, ...) oder leerer String."""
    if 0 <= weekday < len(WEEKDAY_ABBR):
        return WEEKDAY_ABBR[weekday]
    return ""


def default_config() -> WechselplanConfig:
    """Standard-Konfiguration: 8 Turnusse, Notenskala 1-5 in halben Schritten."""
    return WechselplanConfig(
        school_name="Muster-Berufskolleg",
        rotation=RotationConfig(max_turns=MAX_TURNS, default_weekday=1),
        grades=GradeScaleConfig(allowed_values=list(GRADE_VALUES), decimals=1),
        export=ExportConfig(),
    )
