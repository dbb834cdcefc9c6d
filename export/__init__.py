"""Export-Modul: Excel (openpyxl) und PDF (fpdf2) für den Wechselplan."""

from export.excel_export import ExcelExporter
from export.pdf_export import PdfExporter

__all__ = ["ExcelExporter", "PdfExporter"]
