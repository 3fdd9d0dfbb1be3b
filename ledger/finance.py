"""Buchhaltungs-Kern: reine Funktionen über Gruppen und Schüler.

Zwei Formeln für offene Beträge existieren nebeneinander und werden bewusst
nicht vereinheitlicht:

  student_status()  – Sitzungspreis × offene Sitzungen
                      (Gruppenliste, Dashboard)
  amount_owed_by()  – Zykluspreis × offene Sitzungen
                      (Schuldnerliste im Finanzbericht)

Beide liefern verschiedene Werte, sobald sessions_per_month > 1.
"""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from ledger.collation import sort_by_name
from models.group import Group
from models.student import Student


class StatusKind(str, Enum):
    DEBT = "debt"
    CREDIT = "credit"
    NEUTRAL = "neutral"


class DebtThreshold(str, Enum):
    """Ab wann ein Schüler als Schuldner gilt."""
    FULL_CYCLE = "full_cycle"   # sessions_owed >= sessions_per_month
    ANY_OWED = "any_owed"       # sessions_owed > 0


STATUS_LABELS: dict[StatusKind, str] = {
    StatusKind.DEBT: "Zahlung fällig",
    StatusKind.CREDIT: "Guthaben",
    StatusKind.NEUTRAL: "Regulär",
}


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class StudentStatus(BaseModel):
    """Dreiteilige Einstufung eines Schülers innerhalb seiner Gruppe."""

    kind: StatusKind
    label: str
    value: float          # Betrag (DEBT/CREDIT) oder Sitzungsanzahl (NEUTRAL)
    is_debt: bool

    def display(self, currency: str) -> str:
        """'2000.00 DA' für Beträge, '3 Sitzungen' im neutralen Zustand."""
        if self.kind == StatusKind.NEUTRAL:
            return f"{int(self.value)} Sitzungen"
        return f"{self.value:.2f} {currency}"


class GroupFinanceStats(BaseModel):
    """Eingenommener Gesamtbetrag einer Gruppe."""

    group: Group
    collected: float
    student_count: int


class GroupBalance(BaseModel):
    """Offene Beträge und Guthaben einer Gruppe (Sitzungspreis-Formel)."""

    outstanding: float   # alle sessions_owed > 0
    credit: float        # alle sessions_owed < 0


class DashboardTotals(BaseModel):

    """Kennzahlen der Startseite."""

    group_count: int
    student_count: int
    debtor_count: int
    outstanding_total: float   # alle sessions_owed > 0, Sitzungspreis-Formel
    credit_total: float        # alle sessions_owed < 0
    net: float                 # credit_total - outstanding_total


# ─── Preise ───────────────────────────────────────────────────────────────────

def price_in_effect(student: Student, group: Group) -> float:
    """Sonderpreis des Schülers, sonst Gruppenpreis."""
    if student.individual_price is not None:
        return student.individual_price
    return group.monthly_price


def unit_price(student: Student, group: Group) -> float:
    """Preis einer Sitzung. sessions_per_month > 0 garantiert das Group-Modell."""
    return price_in_effect(student, group) / group.sessions_per_month


# ─── Status ───────────────────────────────────────────────────────────────────

def is_in_debt(student: Student, group: Group) -> bool:
    """Schuldner ab genau einem vollen Zyklus offener Sitzungen."""
    return student.sessions_owed >= group.sessions_per_month


def student_status(student: Student, group: Group) -> StudentStatus:
    owed = student.sessions_owed
    if is_in_debt(student, group):
        kind, value = StatusKind.DEBT, owed * unit_price(student, group)
    elif owed < 0:
        kind, value = StatusKind.CREDIT, abs(owed) * unit_price(student, group)
    else:
        kind, value = StatusKind.NEUTRAL, float(owed)
    return StudentStatus(
        kind=kind,
        label=STATUS_LABELS[kind],
        value=value,
        is_debt=kind == StatusKind.DEBT,
    )


def amount_owed_by(student: Student, group: Group) -> float:
    """Offener Betrag für den Finanzbericht: Zykluspreis × offene Sitzungen."""
    return price_in_effect(student, group) * student.sessions_owed


# ─── Schuldner ────────────────────────────────────────────────────────────────

def debtors_of(
    group: Group,
    students: Iterable[Student],
    threshold: DebtThreshold = DebtThreshold.FULL_CYCLE,
) -> list[Student]:
    """Schuldner einer Gruppe, alphabetisch sortiert."""
    members = [s for s in students if s.group_id == group.id]
    if threshold == DebtThreshold.ANY_OWED:
        debtors = [s for s in members if s.sessions_owed > 0]
    else:
        debtors = [s for s in members if is_in_debt(s, group)]
    return sort_by_name(debtors)


def group_balance(group: Group, students: Iterable[Student]) -> GroupBalance:
    """Summe der offenen Sitzungen und des Guthabens, je zum Sitzungspreis."""
    members = [s for s in students if s.group_id == group.id]
    owing = debtors_of(group, members, DebtThreshold.ANY_OWED)
    return GroupBalance(
        outstanding=sum(s.sessions_owed * unit_price(s, group) for s in owing),
        credit=sum(
            abs(s.sessions_owed) * unit_price(s, group)
            for s in members if s.sessions_owed < 0
        ),
    )


# ─── Einnahmen ────────────────────────────────────────────────────────────────

def group_collected_total(group_id: str, students: Iterable[Student]) -> float:
    return sum((s.collected or 0) for s in students if s.group_id == group_id)


def build_group_finance_stats(
    groups: Iterable[Group], students: Iterable[Student]
) -> list[GroupFinanceStats]:
    """Einnahmen und Schülerzahl pro Gruppe, in Gruppenreihenfolge."""
    students = list(students)
    stats = []
    for group in groups:
        members = [s for s in students if s.group_id == group.id]
        stats.append(GroupFinanceStats(
            group=group,
            collected=group_collected_total(group.id, members),
            student_count=len(members),
        ))
    return stats


def aggregate_collected(group_stats: Iterable[GroupFinanceStats]) -> float:
    return sum(g.collected for g in group_stats)


# ─── Dashboard ────────────────────────────────────────────────────────────────

def dashboard_totals(
    groups: Iterable[Group], students: Iterable[Student]
) -> DashboardTotals:
    """Gesamtkennzahlen; Schüler ohne existierende Gruppe werden übersprungen."""
    groups = list(groups)
    students = list(students)
    group_map = {g.id: g for g in groups}

    outstanding = 0.0
    credit = 0.0
    debtor_count = 0
    for s in students:
        g = group_map.get(s.group_id)
        if g is None:
            continue
        unit = unit_price(s, g)
        if s.sessions_owed > 0:
            outstanding += s.sessions_owed * unit
        elif s.sessions_owed < 0:
            credit += abs(s.sessions_owed) * unit
        if is_in_debt(s, g):
            debtor_count += 1

    return DashboardTotals(
        group_count=len(groups),
        student_count=len(students),
        debtor_count=debtor_count,
        outstanding_total=outstanding,
        credit_total=credit,
        net=credit - outstanding,
    )
