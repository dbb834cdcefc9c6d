"""CLI-Tests (click.testing.CliRunner)."""

import json
from pathlib import Path

from click.testing import CliRunner

from main import cli


class TestCLI:

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for cmd in ("config", "generate", "validate", "overview", "grades", "export", "run"):
            assert cmd in result.output

    def test_config_init_and_show(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "init", "--school-name", "BK Süd"])
            assert result.exit_code == 0
            assert Path("config/wechselplan.yaml").exists()

            result = runner.invoke(cli, ["config", "show"])
            assert result.exit_code == 0
            assert "BK Süd" in result.output

            # Zweiter Aufruf ohne --force überschreibt nicht
            result = runner.invoke(cli, ["config", "init", "--school-name", "Anders"])
            assert "existiert bereits" in result.output

    def test_generate_overview_grades(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["generate", "--seed", "3"])
            assert result.exit_code == 0, result.output
            assert Path("output/wechselplan.json").exists()
            assert Path("output/notenliste.json").exists()

            result = runner.invoke(cli, ["overview"])
            assert result.exit_code == 0, result.output
            assert "Turnus 1" in result.output

            result = runner.invoke(cli, ["grades"])
            assert result.exit_code == 0, result.output
            assert "Notenübersicht" in result.output

    def test_grades_use_configured_scale(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("noten.json").write_text(json.dumps({
                "class_name": "X",
                "students": [{"id": 1, "firstName": "Emma", "lastName": "Braun"}],
                "teachers": [{"id": 1, "lastName": "Koch"}],
                "entries": [{"studentId": 1, "teacherId": 1, "first": 2.5}],
            }), encoding="utf-8")
            result = runner.invoke(cli, ["grades", "noten.json"])
            assert result.exit_code == 0, result.output

            # Nur ganze Noten erlaubt: 2.5 wird abgelehnt
            Path("config").mkdir()
            Path("config/wechselplan.yaml").write_text(
                "grades:\n  allowed_values: [1, 2, 3, 4, 5, 6]\n", encoding="utf-8"
            )
            result = runner.invoke(cli, ["grades", "noten.json"])
            assert result.exit_code == 1
            assert "Laden fehlgeschlagen" in result.output

    def test_generate_with_custom_length(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["generate", "--custom-length", "1=6"])
            assert result.exit_code == 0, result.output
            raw = json.loads(Path("output/wechselplan.json").read_text(encoding="utf-8"))
            first = raw["turns"][0]
            assert first["custom_length"] == 6
            assert len(first["weeks"]) == 6

    def test_generate_warns_on_week_mismatch(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            args = ["generate"]
            for n in range(1, 9):
                args += ["--custom-length", f"{n}=1"]
            result = runner.invoke(cli, args)
            assert result.exit_code == 0, result.output
            assert "Zugewiesene Wochen (8)" in result.output

    def test_generate_rejects_bad_custom_length(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["generate", "--custom-length", "eins"])
            assert result.exit_code == 2
            assert "--custom-length" in result.output

    def test_validate_demo_data(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate"])
            result = runner.invoke(cli, ["validate"])
            assert result.exit_code == 0, result.output
            assert "GÜLTIG" in result.output
            assert "Keine Probleme gefunden" in result.output

    def test_validate_without_groups_fails(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("leer.json").write_text(json.dumps({"className": "X"}), encoding="utf-8")
            result = runner.invoke(cli, ["validate", "leer.json"])
            assert result.exit_code == 1
            assert "Keine Gruppen" in result.output

    def test_export_creates_files(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate"])
            result = runner.invoke(cli, [
                "export", "output/wechselplan.json",
                "--grades", "output/notenliste.json", "-o", "out",
            ])
            assert result.exit_code == 0, result.output
            assert Path("out/gruppenliste.xlsx").exists()
            assert Path("out/wechselplan.pdf").exists()
            assert Path("out/turnustage.pdf").exists()

    def test_export_excel_only(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate"])
            result = runner.invoke(cli, ["export", "--no-pdf"])
            assert result.exit_code == 0, result.output
            assert Path("output/gruppenliste.xlsx").exists()
            assert not Path("output/wechselplan.pdf").exists()

    def test_export_pdf_error_aborts(self, monkeypatch):
        from fpdf.errors import FPDFException
        from export.pdf_export import PdfExporter

        def failing_export(self, output_path):
            raise FPDFException("Character not supported")

        monkeypatch.setattr(PdfExporter, "export_wechselplan", failing_export)
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate"])
            result = runner.invoke(cli, ["export", "--no-excel"])
            assert result.exit_code == 1
            assert "PDF-Export fehlgeschlagen" in result.output

    def test_export_non_latin1_teacher(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate"])
            path = Path("output/wechselplan.json")
            raw = json.loads(path.read_text(encoding="utf-8"))
            raw["assignments"][0]["teacher_last_name"] = "Şahin"
            path.write_text(json.dumps(raw, ensure_ascii=False), encoding="utf-8")
            result = runner.invoke(cli, ["export", "--no-excel"])
            assert result.exit_code == 0, result.output
            assert Path("output/wechselplan.pdf").exists()

    def test_missing_file_aborts(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["overview", "fehlt.json"])
            assert result.exit_code == 1
            assert "Laden fehlgeschlagen" in result.output

    def test_invalid_data_aborts(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("kaputt.json").write_text(
                json.dumps({"className": "X", "selectedWeekday": 9}), encoding="utf-8"
            )
            result = runner.invoke(cli, ["overview", "kaputt.json"])
            assert result.exit_code == 1

    def test_run_pipeline(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["run", "--seed", "5"])
            assert result.exit_code == 0, result.output
            assert Path("output/gruppenliste.xlsx").exists()
            assert Path("output/wechselplan.pdf").exists()
