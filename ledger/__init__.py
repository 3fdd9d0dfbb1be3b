"""Buchhaltungs-Kern (reine Funktionen, keine Persistenz)."""

from .collation import sort_by_name
from .finance import (
    DashboardTotals,
    DebtThreshold,
    GroupBalance,
    GroupFinanceStats,
    StatusKind,
    StudentStatus,
    aggregate_collected,
    amount_owed_by,
    build_group_finance_stats,
    dashboard_totals,
    debtors_of,
    group_balance,
    group_collected_total,
    is_in_debt,
    price_in_effect,
    student_status,
    unit_price,
)

__all__ = [
    "DashboardTotals",
    "DebtThreshold",
    "GroupBalance",
    "GroupFinanceStats",
    "StatusKind",
    "StudentStatus",
    "aggregate_collected",
    "amount_owed_by",
    "build_group_finance_stats",
    "dashboard_totals",
    "debtors_of",
    "group_balance",
    "group_collected_total",
    "is_in_debt",
    "price_in_effect",
    "sort_by_name",
    "student_status",
    "unit_price",
]
