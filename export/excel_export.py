"""Excel-Export für den Finanzbericht (openpyxl)."""

from pathlib import Path

from analysis.financial_report import FinancialReport

from export.helpers import COLORS, report_filename_stem


class ExcelExporter:
    """Exportiert einen FinancialReport in eine Excel-Datei mit zwei Blättern."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_NAME_W   = 34
    COL_NUM_W    = 14
    COL_PHONE_W  = 16

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22

    def __init__(self, report: FinancialReport):
        self.report = report

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> Path:
        """Erstellt die Excel-Datei (Übersicht + Schuldner) und gibt den Pfad zurück."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_uebersicht(wb)
        self._sheet_schuldner(wb)

        output_path = Path(output_path)
        if output_path.is_dir():
            output_path = output_path / f"{report_filename_stem(self.report.report_date)}.xlsx"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        return output_path

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, headers: list[str]) -> None:
        from openpyxl.styles import Alignment, Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[1].height = self.ROW_HEADER_H

    def _set_widths(self, ws, widths: list[int]) -> None:
        from openpyxl.utils import get_column_letter
        for col, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

    # ─── Blätter ──────────────────────────────────────────────────────────────

    def _sheet_uebersicht(self, wb) -> None:
        """Eine Zeile pro Gruppe plus Summenzeile."""
        from openpyxl.styles import Font
        ws = wb.create_sheet("Übersicht")
        self._write_header_row(ws, [
            "Gruppe", "Schüler", "Gehaltene Sitzungen",
            f"Eingenommen ({self.report.currency})",
            f"Offen ({self.report.currency})", "Schuldner",
        ])
        self._set_widths(ws, [self.COL_NAME_W] + [self.COL_NUM_W] * 5)

        border = self._thin_border()
        row = 2
        for g in self.report.groups:
            values = [g.name, g.student_count, g.teacher_sessions,
                      round(g.collected, 2), round(g.debt_total, 2), len(g.debtors)]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border
                if col in (4, 5):
                    cell.number_format = "0.00"
            if g.debtors:
                ws.cell(row=row, column=5).fill = self._fill(COLORS["debt"])
            row += 1

        totals = ["Gesamt", sum(g.student_count for g in self.report.groups),
                  sum(g.teacher_sessions for g in self.report.groups),
                  round(self.report.total_collected, 2),
                  round(self.report.total_debt, 2), self.report.debtor_count]
        for col, value in enumerate(totals, 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = Font(bold=True)
            cell.fill = self._fill(COLORS["total"])
            cell.border = border
            if col in (4, 5):
                cell.number_format = "0.00"
        ws.freeze_panes = "A2"

    def _sheet_schuldner(self, wb) -> None:
        """Alle Schuldner, gruppiert nach Gruppe (Reihenfolge wie im Bericht)."""
        ws = wb.create_sheet("Schuldner")
        self._write_header_row(ws, [
            "Gruppe", "Name", "Telefon", "Offene Sitzungen",
            f"Betrag ({self.report.currency})",
        ])
        self._set_widths(ws, [self.COL_NAME_W, self.COL_NAME_W, self.COL_PHONE_W,
                              self.COL_NUM_W, self.COL_NUM_W])

        border = self._thin_border()
        row = 2
        for g in self.report.groups:
            for d in g.debtors:
                values = [g.name, d.name, d.phone or "", d.sessions_owed,
                          round(d.amount_owed, 2)]
                for col, value in enumerate(values, 1):
                    cell = ws.cell(row=row, column=col, value=value)
                    cell.border = border
                cell.number_format = "0.00"
                row += 1
        ws.freeze_panes = "A2"
