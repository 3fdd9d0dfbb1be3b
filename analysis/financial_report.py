"""Finanzbericht: Einnahmen pro Gruppe, gehaltene Sitzungen und Schuldnerlisten.

Liefert ein Pydantic-Modell, eine Klartext-Fassung zum Weitergeben (z.B. per
Messenger) und eine formatierte Rich-Ausgabe.
"""

from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel

from ledger.finance import (
    aggregate_collected,
    amount_owed_by,
    build_group_finance_stats,
    debtors_of,
)
from models.group import Group
from models.student import Student


# ─── Bericht-Modelle ──────────────────────────────────────────────────────────

class DebtorLine(BaseModel):
    """Ein Schuldner innerhalb einer Gruppe."""

    student_id: str
    name: str
    phone: Optional[str] = None
    sessions_owed: int
    amount_owed: float


class GroupReport(BaseModel):
    """Bericht für eine einzelne Gruppe."""

    group_id: str
    name: str
    student_count: int
    teacher_sessions: int
    collected: float
    debtors: list[DebtorLine]

    @property
    def debt_total(self) -> float:
        return sum(d.amount_owed for d in self.debtors)


class FinancialReport(BaseModel):
    """Vollständiger Finanzbericht über alle Gruppen."""

    report_date: date
    currency: str
    groups: list[GroupReport]
    total_collected: float

    @property
    def total_debt(self) -> float:
        return sum(g.debt_total for g in self.groups)

    @property
    def debtor_count(self) -> int:
        return sum(len(g.debtors) for g in self.groups)

    def money(self, value: float) -> str:
        return f"{value:.2f} {self.currency}"

    # ─── Ausgabe ───

    def render_text(self) -> str:
        """Klartext-Bericht; eine Zeile pro Kennzahl, Schuldner eingerückt."""
        lines = [
            f"Finanzbericht vom {self.report_date.strftime('%d.%m.%Y')}",
            "=" * 40,
            f"Gesamt eingenommen: {self.money(self.total_collected)}",
            f"Offene Beträge: {self.money(self.total_debt)} "
            f"({self.debtor_count} Schuldner)",
        ]
        if not self.groups:
            lines.append("")
            lines.append("Keine Gruppen vorhanden.")
        for g in self.groups:
            lines.append("")
            lines.append(f"■ {g.name}")
            lines.append(
                f"  Schüler: {g.student_count} | "
                f"Gehaltene Sitzungen: {g.teacher_sessions}"
            )
            lines.append(f"  Eingenommen: {self.money(g.collected)}")
            if g.debtors:
                lines.append(f"  Schuldner ({len(g.debtors)}):")
                for d in g.debtors:
                    phone = f" – {d.phone}" if d.phone else ""
                    lines.append(
                        f"    • {d.name}{phone}: {self.money(d.amount_owed)} "
                        f"({d.sessions_owed} Sitzungen)"
                    )
            else:
                lines.append("  Keine Schuldner.")
        return "\n".join(lines) + "\n"

    def print_rich(self) -> None:
        """Gibt den Bericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        debt_color = "red" if self.total_debt > 0 else "green"
        console.print(Panel(
            f"Gesamt eingenommen: [bold green]{self.money(self.total_collected)}[/bold green]\n"
            f"Offene Beträge: [{debt_color}]{self.money(self.total_debt)}[/{debt_color}] "
            f"({self.debtor_count} Schuldner)",
            title=f"Finanzbericht – {self.report_date.strftime('%d.%m.%Y')}",
            border_style="cyan",
        ))

        table = Table(title="Gruppen", box=box.ROUNDED)
        table.add_column("Gruppe", style="bold")
        table.add_column("Schüler", justify="right")
        table.add_column("Sitzungen", justify="right")
        table.add_column("Eingenommen", justify="right")
        table.add_column("Offen", justify="right")
        for g in self.groups:
            table.add_row(
                g.name, str(g.student_count), str(g.teacher_sessions),
                self.money(g.collected),
                f"[red]{self.money(g.debt_total)}[/red]" if g.debtors else "–",
            )
        console.print(table)

        for g in self.groups:
            if not g.debtors:
                continue
            d_table = Table(title=f"Schuldner – {g.name}", box=box.SIMPLE)
            d_table.add_column("Name")
            d_table.add_column("Telefon")
            d_table.add_column("Sitzungen", justify="right")
            d_table.add_column("Betrag", justify="right")
            for d in g.debtors:
                d_table.add_row(d.name, d.phone or "", str(d.sessions_owed),
                                self.money(d.amount_owed))
            console.print(d_table)


# ─── Builder ──────────────────────────────────────────────────────────────────

class FinancialReportBuilder:
    """Berechnet den Finanzbericht aus Gruppen und Schülern."""

    def __init__(self, currency: str):
        self.currency = currency

    def build(self, groups: Iterable[Group], students: Iterable[Student],
              report_date: Optional[date] = None) -> FinancialReport:
        groups = list(groups)
        students = list(students)
        stats = build_group_finance_stats(groups, students)

        group_reports = [
            GroupReport(
                group_id=st.group.id,
                name=st.group.name,
                student_count=st.student_count,
                teacher_sessions=st.group.teacher_sessions,
                collected=st.collected,
                debtors=[
                    DebtorLine(
                        student_id=s.id,
                        name=s.name,
                        phone=s.phone,
                        sessions_owed=s.sessions_owed,
                        amount_owed=amount_owed_by(s, st.group),
                    )
                    for s in debtors_of(st.group, students)
                ],
            )
            for st in stats
        ]

        return FinancialReport(
            report_date=report_date or date.today(),
            currency=self.currency,
            groups=group_reports,
            total_collected=aggregate_collected(stats),
        )
