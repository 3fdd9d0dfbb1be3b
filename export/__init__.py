"""Export-Modul: Finanzbericht als Excel (openpyxl) und Klartext."""

from export.excel_export import ExcelExporter
from export.helpers import write_text_report

__all__ = ["ExcelExporter", "write_text_report"]
