from pydantic import BaseModel, Field, field_validator


# ─── ROTATION ───

class RotationConfig(BaseModel):
    """Einstellungen für die Turnus-Rotation."""
    # Maximale Anzahl Turnusse, die angezeigt und exportiert werden
    max_turns: int = Field(8, ge=1, le=12,
        description="Maximale Anzahl Turnusse pro Wechselplan")
    # Standard-Wochentag für neue Pläne (0=So, 1=Mo, ..., 6=Sa)
    default_weekday: int = Field(1, ge=0, le=6,
        description="Standard-Wochentag (0=Sonntag .. 6=Samstag)")


# ─── NOTEN ───

class GradeScaleConfig(BaseModel):
    """Notenskala für die Notenverwaltung."""
    # Zulässige Notenwerte (Eingabe wird beim Speichern geprüft)
    allowed_values: list[float] = Field(
        default=[1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 5.0],
        description="Zulässige Notenwerte")
    # Nachkommastellen des Durchschnitts
    decimals: int = Field(1, ge=0, le=2,
        description="Nachkommastellen des Notendurchschnitts")

    @field_validator("allowed_values")
    @classmethod
    def _sorted_unique(cls, v: list[float]) -> list[float]:
        if not v:
            raise ValueError("Notenskala darf nicht leer sein.")
        return sorted(set(v))


# ─── EXPORT ───

class ExportConfig(BaseModel):
    """Dateinamen und Ausgabeverzeichnis für PDF- und Excel-Export."""
    # Ausgabeverzeichnis (relativ zum Arbeitsverzeichnis)
    output_dir: str = Field("output", description="Ausgabeverzeichnis")
    # Dateiname Wechselplan-PDF
    pdf_wechselplan_name: str = Field("wechselplan.pdf")
    # Dateiname Turnustage-PDF
    pdf_turnus_name: str = Field("turnustage.pdf")
    # Dateiname Excel-Gruppenliste
    excel_name: str = Field("gruppenliste.xlsx")


# ─── GESAMT-CONFIG ───

class WechselplanConfig(BaseModel):
    """Gesamtkonfiguration des Wechselplan-Generators."""
    # Name der Schule (erscheint in PDF-Kopfzeilen)
    school_name: str = Field("Muster-Berufskolleg",
        description="Name der Schule")
    # Turnus-Rotation
    rotation: RotationConfig = Field(default_factory=RotationConfig)
    # Notenskala
    grades: GradeScaleConfig = Field(default_factory=GradeScaleConfig)
    # Export-Einstellungen
    export: ExportConfig = Field(default_factory=ExportConfig)
