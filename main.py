"""Wechselplan-Generator: Haupt-CLI.

Verwendung:
  python main.py config init                 Standard-Konfiguration anlegen
  python main.py config show                 Konfiguration anzeigen
  python main.py generate                    Demo-Daten erzeugen (JSON)
  python main.py validate <plan.json>        Datensatz prüfen
  python main.py overview <plan.json>        Wechselplan im Terminal anzeigen
  python main.py grades <noten.json>         Notendurchschnitte anzeigen
  python main.py export <plan.json>          Excel + PDF exportieren
  python main.py run                         generate → export
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfade für gespeicherte Datensätze
DEFAULT_DATA_JSON = Path("output/wechselplan.json")
DEFAULT_GRADES_JSON = Path("output/notenliste.json")


def _load_config():
    """Lädt die Konfiguration; ohne Datei gelten die Standardwerte."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_data_or_abort(path: Path):
    """Lädt einen Wechselplan-Datensatz oder bricht mit Fehlermeldung ab."""
    from models.wechselplan_data import ScheduleDataError, WechselplanData
    try:
        return WechselplanData.load_json(path)
    except (FileNotFoundError, ScheduleDataError) as e:
        console.print(f"[red bold]Laden fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)


def _load_grades_or_abort(path: Path, grade_values: list[float] | None = None):
    from models.grade import GradeBook
    from models.wechselplan_data import ScheduleDataError
    try:
        return GradeBook.load_json(path, grade_values)
    except (FileNotFoundError, ScheduleDataError) as e:
        console.print(f"[red bold]Laden fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("init")
@click.option("--school-name", default=None, help="Name der Schule.")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
def config_init(school_name: str | None, force: bool):
    """Legt die Standard-Konfiguration als YAML an."""
    from config.defaults import default_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return

    config = default_config()
    if school_name:
        config = config.model_copy(update={"school_name": school_name})
    mgr.save(config)


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.defaults import weekday_name
    config = _load_config()

    console.print(Panel(
        f"[bold]{config.school_name}[/bold]",
        title="Wechselplan-Konfiguration",
        border_style="cyan",
    ))

    table = Table(box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Max. Turnusse", str(config.rotation.max_turns))
    table.add_row("Standard-Wochentag", weekday_name(config.rotation.default_weekday))
    table.add_row("Notenskala", ", ".join(str(v) for v in config.grades.allowed_values))
    table.add_row("Nachkommastellen Ø", str(config.grades.decimals))
    table.add_row("Ausgabeverzeichnis", config.export.output_dir)
    console.print(table)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

def _parse_custom_lengths(values: tuple[str, ...]) -> dict[int, int]:
    """'1=4' → {1: 4}; Turnusnummer 1-basiert, Länge in Wochen."""
    result: dict[int, int] = {}
    for value in values:
        turn, sep, weeks = value.partition("=")
        if not sep or not turn.strip().isdigit() or not weeks.strip().isdigit():
            raise click.BadParameter(f"'{value}': erwartet TURNUS=WOCHEN, z.B. 1=4",
                                     param_hint="--custom-length")
        result[int(turn)] = int(weeks)
    return result


@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--class-name", default="BFS-24a", help="Klassenbezeichnung.")
@click.option("--custom-length", "custom_lengths", multiple=True, metavar="TURNUS=WOCHEN",
              help="Feste Länge eines Turnus, z.B. 1=4 (mehrfach möglich).")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für den Wechselplan-Datensatz.")
@click.option("--grades-path", default=str(DEFAULT_GRADES_JSON),
              help="Pfad für die Notenliste.")
def cmd_generate(seed: int, class_name: str, custom_lengths: tuple[str, ...],
                 json_path: str, grades_path: str):
    """Erzeugt Demo-Daten (Gruppen, Lehrkräfte, Turnusse, Noten)."""
    from data.fake_data import FakeDataGenerator
    config = _load_config()
    lengths = _parse_custom_lengths(custom_lengths) if custom_lengths else None

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = FakeDataGenerator(config, seed=seed, custom_lengths=lengths)
    data = gen.generate(class_name)
    grade_book = gen.generate_grades(data)
    gen.print_summary(data)
    if gen.turn_schedule and gen.turn_schedule.week_mismatch:
        console.print(f"[yellow]⚠ {gen.turn_schedule.week_mismatch}[/yellow]")

    data.save_json(Path(json_path))
    console.print(f"[green]✓[/green] Wechselplan gespeichert: {json_path}")
    grade_book.save_json(Path(grades_path))
    console.print(f"[green]✓[/green] Notenliste gespeichert: {grades_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("datei", type=click.Path(path_type=Path), default=str(DEFAULT_DATA_JSON))
def cmd_validate(datei: Path):
    """Prüft einen Wechselplan-Datensatz auf Lücken im Raster."""
    from engine.plan import build_plan
    config = _load_config()
    data = _load_data_or_abort(datei)
    plan = build_plan(data, config.rotation.max_turns)

    console.print(f"\n{data.summary()}\n")
    errors: list[str] = []
    warnings: list[str] = []

    if not data.groups:
        errors.append("Keine Gruppen vorhanden – Rotation nicht möglich.")
    if not data.assignments:
        errors.append("Keine Lehrer-Zuweisungen vorhanden.")
    for period, rows in (("Vormittag", plan.am_rows), ("Nachmittag", plan.pm_rows)):
        if len(rows) > len(data.groups):
            warnings.append(
                f"{period}: {len(rows)} Lehrkräfte bei {len(data.groups)} Gruppen – "
                f"{len(rows) - len(data.groups)} Lehrkräfte ohne Gruppe."
            )
    for c in plan.columns:
        if c.window.is_empty:
            warnings.append(f"{c.key}: nur Ferienwochen – keine Unterrichtswochen.")
    if len(data.turns) > len(plan.columns):
        warnings.append(
            f"{len(data.turns) - len(plan.columns)} Turnusse über dem Limit "
            f"von {config.rotation.max_turns} werden nicht angezeigt."
        )

    lines = (
        ["[bold green]✓ GÜLTIG[/bold green]"] if not errors
        else ["[bold red]✗ UNGÜLTIG[/bold red]"]
    )
    if errors:
        lines.append("\n[red bold]Fehler:[/red bold]")
        lines += [f"  [red]• {e}[/red]" for e in errors]
    if warnings:
        lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
        lines += [f"  [yellow]• {w}[/yellow]" for w in warnings]
    if not errors and not warnings:
        lines.append("[dim]Keine Probleme gefunden.[/dim]")
    console.print(Panel("\n".join(lines), title="Datensatz-Prüfung", border_style="cyan"))

    sys.exit(1 if errors else 0)


# ─── OVERVIEW ─────────────────────────────────────────────────────────────────

@click.command("overview")
@click.argument("datei", type=click.Path(path_type=Path), default=str(DEFAULT_DATA_JSON))
def cmd_overview(datei: Path):
    """Zeigt Turnusse und Gruppenrotation im Terminal an."""
    from engine.plan import build_plan
    from export.tui_renderer import render_rotation_table, render_turn_table
    from models.assignment import Period

    config = _load_config()
    data = _load_data_or_abort(datei)
    plan = build_plan(data, config.rotation.max_turns)

    console.print(Panel(
        f"[bold]Wechselplan {plan.class_name}[/bold]  |  {plan.weekday_name}",
        border_style="cyan",
    ))
    console.print(render_turn_table(plan))
    for period in (Period.AM, Period.PM):
        if plan.rows_for(period):
            console.print(render_rotation_table(plan, period, data.period_time_range(period)))


# ─── GRADES ───────────────────────────────────────────────────────────────────

@click.command("grades")
@click.argument("datei", type=click.Path(path_type=Path), default=str(DEFAULT_GRADES_JSON))
def cmd_grades(datei: Path):
    """Zeigt die Notendurchschnitte pro Schüler und Halbjahr an."""
    from export.tui_renderer import render_grade_table
    config = _load_config()
    grade_book = _load_grades_or_abort(datei, config.grades.allowed_values)
    console.print(render_grade_table(grade_book, config.grades.decimals))


# ─── EXPORT ───────────────────────────────────────────────────────────────────

def _run_export(data_path: Path, grades_path: Path | None, output_dir: str | None,
                pdf: bool, excel: bool) -> None:
    from engine.plan import build_plan
    from fpdf.errors import FPDFException
    from export.excel_export import ExcelExporter
    from export.pdf_export import PdfExporter

    config = _load_config()
    data = _load_data_or_abort(data_path)
    grade_book = (
        _load_grades_or_abort(grades_path, config.grades.allowed_values) if grades_path else None
    )
    plan = build_plan(data, config.rotation.max_turns)
    out_dir = Path(output_dir or config.export.output_dir)

    if excel:
        path = out_dir / config.export.excel_name
        ExcelExporter(plan, data, grade_book, config.grades.decimals).export(path)
        console.print(f"[green]✓[/green] Excel gespeichert: {path}")
    if pdf:
        exporter = PdfExporter(plan, data, config.school_name)
        for name, export in ((config.export.pdf_wechselplan_name, exporter.export_wechselplan),
                             (config.export.pdf_turnus_name, exporter.export_turnus_dates)):
            path = out_dir / name
            try:
                export(path)
            except FPDFException as e:
                console.print(f"[red bold]PDF-Export fehlgeschlagen:[/red bold] {path}\n{e}")
                sys.exit(1)
            console.print(f"[green]✓[/green] PDF gespeichert: {path}")


@click.command("export")
@click.argument("datei", type=click.Path(path_type=Path), default=str(DEFAULT_DATA_JSON))
@click.option("--grades", "grades_path", type=click.Path(path_type=Path), default=None,
              help="Notenliste (JSON) für das Blatt 'Notenliste'.")
@click.option("--output-dir", "-o", default=None, help="Ausgabeverzeichnis.")
@click.option("--pdf/--no-pdf", default=True, help="PDF-Dateien erzeugen.")
@click.option("--excel/--no-excel", default=True, help="Excel-Datei erzeugen.")
def cmd_export(datei: Path, grades_path: Path | None, output_dir: str | None,
               pdf: bool, excel: bool):
    """Exportiert den Wechselplan als Excel und PDF."""
    _run_export(datei, grades_path, output_dir, pdf, excel)


# ─── RUN ──────────────────────────────────────────────────────────────────────

@click.command("run")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.pass_context
def cmd_run(ctx: click.Context, seed: int):
    """Führt generate → export aus."""
    console.print("[bold]Pipeline: generate → export[/bold]")
    ctx.invoke(cmd_generate, seed=seed)
    _run_export(DEFAULT_DATA_JSON, DEFAULT_GRADES_JSON, None, pdf=True, excel=True)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Ausführliche Log-Ausgabe.")
def cli(verbose: bool):
    """Wechselplan-Generator: Gruppenrotation, Turnusse und Notenübersicht."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_validate)
cli.add_command(cmd_overview)
cli.add_command(cmd_grades)
cli.add_command(cmd_export)
cli.add_command(cmd_run)


if __name__ == "__main__":
    main()
