"""Beispieldaten-Generator für die Nachhilfe-Buchhaltung.

Erzeugt reproduzierbare Gruppen und Schüler mit absichtlich gemischten Ständen:
  1. Schuldner: mindestens ein voller Zyklus offen
  2. Guthaben: im Voraus bezahlt (sessions_owed < 0)
  3. Sonderpreise: etwa jeder fünfte Schüler
  4. Bereits eingenommene Beträge (collected) passend zu den Zahlungen
"""

import random
from typing import Optional

from models.group import Group
from models.student import Student
from models.tuition_data import TuitionData

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "محمد", "أحمد", "يوسف", "عبد الرحمن", "إسماعيل", "كريم", "سفيان",
    "أمين", "ياسين", "رياض", "فاطمة", "مريم", "خديجة", "سارة", "إيمان",
    "نور", "ليلى", "هاجر", "أسماء", "آية",
]

_LAST_NAMES = [
    "بن يوسف", "بلقاسم", "حداد", "بوزيد", "مسعودي", "شريف", "زروقي",
    "بن علي", "عمراني", "قاسمي", "بوعلام", "سعيدي",
]

# (Name, Monatspreis, Sitzungen pro Monat)
_GROUP_TEMPLATES = [
    ("رياضيات – السنة الأولى ثانوي", 2000, 4),
    ("فيزياء – السنة الثانية ثانوي", 2500, 4),
    ("رياضيات – بكالوريا", 3000, 8),
    ("لغة فرنسية – متوسط", 1500, 4),
]


class FakeDataGenerator:
    """Erzeugt einen Beispiel-Datenbestand (deterministisch bei gleichem Seed)."""

    def __init__(self, seed: Optional[int] = None,
                 students_per_group: tuple[int, int] = (4, 9)) -> None:
        self.rng = random.Random(seed)
        self.students_per_group = students_per_group
        self._counter = 0

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}{self._counter:04d}"

    def _make_student(self, group: Group) -> Student:
        name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
        individual_price = None
        if self.rng.random() < 0.20:
            # Ermäßigung in 500er-Schritten
            individual_price = float(max(group.monthly_price - 500, 500))

        payments = self.rng.randint(0, 3)
        price = individual_price if individual_price is not None else group.monthly_price
        attended = payments * group.sessions_per_month + self.rng.randint(
            -group.sessions_per_month, group.sessions_per_month + 2
        )
        attended = max(attended, 0)

        phone = None
        if self.rng.random() < 0.6:
            phone = "0" + self.rng.choice("567") + "".join(
                self.rng.choice("0123456789") for _ in range(8)
            )

        return Student(
            id=self._next_id("s"),
            name=name,
            group_id=group.id,
            phone=phone,
            sessions_owed=attended - payments * group.sessions_per_month,
            individual_price=individual_price,
            collected=payments * price,
        )

    def generate(self) -> TuitionData:
        groups: list[Group] = []
        students: list[Student] = []
        lo, hi = self.students_per_group
        for name, price, sessions in _GROUP_TEMPLATES:
            group = Group(
                id=self._next_id("g"),
                name=name,
                monthly_price=price,
                sessions_per_month=sessions,
                teacher_sessions=self.rng.randint(0, 3 * sessions),
            )
            groups.append(group)
            for _ in range(self.rng.randint(lo, hi)):
                students.append(self._make_student(group))
        return TuitionData(groups=groups, students=students)

    def print_summary(self, data: TuitionData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Beispieldaten", box=box.ROUNDED)
        table.add_column("Gruppe", style="bold cyan")
        table.add_column("Schüler", justify="right")
        table.add_column("Preis", justify="right")
        table.add_column("Sitzungen", justify="right")

        for g in data.groups:
            count = sum(1 for s in data.students if s.group_id == g.id)
            table.add_row(g.name, str(count), f"{g.monthly_price:.0f}",
                          str(g.sessions_per_month))

        console.print(table)
