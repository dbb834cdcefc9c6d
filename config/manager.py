"""Konfigurationsmanager für den Wechselplan-Generator.

Die Konfiguration liegt als kommentiertes YAML (ruamel.yaml) unter
``config/wechselplan.yaml`` und wird beim Laden über Pydantic geprüft.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import WechselplanConfig

logger = logging.getLogger(__name__)

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 100


def _header() -> str:
    return (
        "# ------------------------------------------------\n"
        "# Wechselplan-Generator: Konfiguration\n"
        f"# Angelegt am {date.today().strftime('%d.%m.%Y')}\n"
        "# Wochentage: 0=Sonntag, 1=Montag, ..., 6=Samstag\n"
        "# ------------------------------------------------\n\n"
    )


# Abschnittsüberschriften im YAML (Schlüssel → Titel)
_SECTION_TITLES = {
    "rotation": "Turnus-Rotation",
    "grades": "Notenskala",
    "export": "Export",
}


def _commented_section(model: BaseModel, values: dict[str, Any]) -> CommentedMap:
    """Abschnitt mit den Feldbeschreibungen als Zeilenend-Kommentar."""
    section = CommentedMap(values)
    for name, field in type(model).model_fields.items():
        if field.description and name in section:
            section.yaml_add_eol_comment(field.description, name)
    return section


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "wechselplan.yaml"

    def first_run_check(self) -> bool:
        """True, solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    @staticmethod
    def validate(raw: Any, source: Path) -> WechselplanConfig:
        """Prüft rohe YAML-Daten; ValueError mit Dateiname bei Fehlern."""
        if raw is not None and not isinstance(raw, dict):
            raise ValueError(f"Konfigurationsdatei ungültig: {source}\nErwartet wird ein Mapping.")
        try:
            return WechselplanConfig.model_validate(dict(raw or {}))
        except ValidationError as e:
            raise ValueError(f"Konfigurationsdatei ungültig: {source}\n{e}") from e

    def load(self, path: Optional[Path] = None) -> WechselplanConfig:
        target = Path(path or self.DEFAULT_CONFIG)
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Anlegen mit 'python main.py config init'."
            )
        with open(target, "r", encoding="utf-8") as f:
            config = self.validate(yaml.load(f), target)
        logger.debug(f"Konfiguration geladen: {target}")
        return config

    def load_or_default(self, path: Optional[Path] = None) -> WechselplanConfig:
        """Wie load(), ohne Datei gelten jedoch die Standardwerte."""
        target = Path(path or self.DEFAULT_CONFIG)
        if target.exists():
            return self.load(target)
        from config.defaults import default_config
        logger.info(f"Keine Konfiguration unter {target}, verwende Standardwerte")
        return default_config()

    # ─── Speichern ───

    def save(self, config: WechselplanConfig, path: Optional[Path] = None) -> Path:
        """Schreibt die Konfiguration als kommentiertes YAML und gibt den Pfad zurück."""
        target = Path(path or self.DEFAULT_CONFIG)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(_header())
            yaml.dump(self.to_yaml(config), f)
        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
        return target

    def to_yaml(self, config: WechselplanConfig) -> CommentedMap:
        """YAML-Struktur mit Abschnittsüberschriften und Feldkommentaren."""
        plain = json.loads(config.model_dump_json())
        root = CommentedMap()
        root["school_name"] = plain["school_name"]
        for key, title in _SECTION_TITLES.items():
            root[key] = _commented_section(getattr(config, key), plain[key])
            root.yaml_set_comment_before_after_key(key, before=f"\n{title}")
        return root
