"""Tests für Finanzbericht (Modell, Klartext) und Excel-Export."""

from datetime import date

import pytest

from analysis.financial_report import FinancialReport, FinancialReportBuilder
from export.excel_export import ExcelExporter
from export.helpers import write_text_report
from models.group import Group
from models.student import Student


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_data():
    groups = [
        Group(id="g1", name="Mathe", monthly_price=2000, sessions_per_month=4,
              teacher_sessions=6),
        Group(id="g2", name="Physik", monthly_price=3000, sessions_per_month=8),
    ]
    students = [
        Student(id="s1", name="Yasmin", group_id="g1", sessions_owed=5,
                phone="0661", collected=2000),
        Student(id="s2", name="Ali", group_id="g1", sessions_owed=4,
                individual_price=1000, collected=1000),
        Student(id="s3", name="Omar", group_id="g1", sessions_owed=3),
        Student(id="s4", name="Nour", group_id="g2", sessions_owed=-8,
                collected=6000),
    ]
    return groups, students


@pytest.fixture
def report() -> FinancialReport:
    groups, students = _make_data()
    return FinancialReportBuilder("DA").build(groups, students,
                                              report_date=date(2024, 3, 1))


# ─── MODELL ───────────────────────────────────────────────────────────────────

class TestFinancialReport:
    def test_totals(self, report):
        assert report.total_collected == 9000
        assert [g.collected for g in report.groups] == [3000, 6000]

    def test_group_details(self, report):
        mathe = report.groups[0]
        assert mathe.student_count == 3
        assert mathe.teacher_sessions == 6

    def test_debtors_sorted_with_report_formula(self, report):
        """Schuldner alphabetisch; Betrag = Zykluspreis × offene Sitzungen."""
        debtors = report.groups[0].debtors
        assert [d.name for d in debtors] == ["Ali", "Yasmin"]
        assert debtors[0].amount_owed == 4000    # 1000 × 4
        assert debtors[1].amount_owed == 10000   # 2000 × 5
        assert report.groups[0].debt_total == 14000
        assert report.groups[1].debtors == []
        assert report.debtor_count == 2
        assert report.total_debt == 14000

    def test_empty(self):
        r = FinancialReportBuilder("DA").build([], [])
        assert r.groups == [] and r.total_collected == 0
        assert "Keine Gruppen vorhanden." in r.render_text()


# ─── KLARTEXT ─────────────────────────────────────────────────────────────────

class TestRenderText:
    def test_contains_key_lines(self, report):
        text = report.render_text()
        assert text.startswith("Finanzbericht vom 01.03.2024")
        assert "Gesamt eingenommen: 9000.00 DA" in text
        assert "■ Mathe" in text
        assert "Gehaltene Sitzungen: 6" in text
        assert "• Yasmin – 0661: 10000.00 DA (5 Sitzungen)" in text
        assert "• Ali: 4000.00 DA (4 Sitzungen)" in text
        assert "Keine Schuldner." in text

    def test_debtor_order_in_text(self, report):
        text = report.render_text()
        assert text.index("Ali:") < text.index("Yasmin")

    def test_write_text_report_to_directory(self, report, tmp_path):
        path = write_text_report(report.render_text(), tmp_path, report.report_date)
        assert path.name == "finanzbericht-2024-03-01.txt"
        assert path.read_text(encoding="utf-8") == report.render_text()

    def test_print_rich_does_not_fail(self, report, capsys):
        report.print_rich()
        out = capsys.readouterr().out
        assert "Mathe" in out


# ─── EXCEL ────────────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_sheets_and_values(self, report, tmp_path):
        from openpyxl import load_workbook

        path = ExcelExporter(report).export(tmp_path / "bericht.xlsx")
        wb = load_workbook(path)
        assert wb.sheetnames == ["Übersicht", "Schuldner"]

        ws = wb["Übersicht"]
        assert ws.cell(row=1, column=1).value == "Gruppe"
        assert ws.cell(row=2, column=1).value == "Mathe"
        assert ws.cell(row=2, column=4).value == 3000
        assert ws.cell(row=2, column=5).value == 14000
        assert ws.cell(row=4, column=1).value == "Gesamt"
        assert ws.cell(row=4, column=4).value == 9000

        ds = wb["Schuldner"]
        assert [ds.cell(row=r, column=2).value for r in (2, 3)] == ["Ali", "Yasmin"]
        assert ds.cell(row=3, column=3).value == "0661"
        assert ds.max_row == 3

    def test_directory_target_gets_default_name(self, report, tmp_path):
        path = ExcelExporter(report).export(tmp_path)
        assert path.name == "finanzbericht-2024-03-01.xlsx"
        assert path.exists()
