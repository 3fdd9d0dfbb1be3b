"""TuitionRepository: Gruppen und Schüler im Speicher + alle erlaubten Änderungen.

Jede Änderung wird sofort über den JsonStore gespeichert. Unbekannte IDs sind
kein Fehler: die Operation tut nichts und liefert None bzw. False.
"""

import logging
import uuid
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from config.schema import StorageConfig
from data.store import JsonStore
from ledger.finance import price_in_effect
from models.group import Group
from models.student import Student

logger = logging.getLogger(__name__)

# Über update_student() änderbare Felder (group_id, id, collected sind fest)
EDITABLE_STUDENT_FIELDS = frozenset(
    {"name", "phone", "individual_price", "sessions_owed"}
)


def _new_id() -> str:
    return uuid.uuid4().hex


class TuitionRepository:
    """Maßgeblicher Datenbestand einer Sitzung mit explizitem load()/save()."""

    def __init__(
        self,
        store: JsonStore,
        storage: StorageConfig,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.store = store
        self.storage = storage
        self._new_id = id_factory or _new_id
        self._groups: list[Group] = []
        self._students: list[Student] = []

    # ─── Lesen ───

    @property
    def groups(self) -> list[Group]:
        return list(self._groups)

    @property
    def students(self) -> list[Student]:
        return list(self._students)

    def get_group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self._groups if g.id == group_id), None)

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students if s.id == student_id), None)

    def students_of(self, group_id: str) -> list[Student]:
        return [s for s in self._students if s.group_id == group_id]

    # ─── Lebenszyklus ───

    def load(self) -> "TuitionRepository":
        """Lädt beide Listen; alte Schlüssel werden einmalig übernommen."""
        raw_groups = self._read_with_migration(
            self.storage.groups_key, self.storage.legacy_groups_keys
        )
        raw_students = self._read_with_migration(
            self.storage.students_key, self.storage.legacy_students_keys
        )
        self._groups = self._parse_records(Group, raw_groups, self.storage.groups_key)
        self._students = self._parse_records(
            Student, raw_students, self.storage.students_key
        )
        return self

    def save(self) -> None:
        self._save_groups()
        self._save_students()

    def _read_with_migration(self, key: str, legacy_keys: Iterable[str]) -> list:
        if self.store.contains(key):
            return self.store.get(key, [])
        for legacy in legacy_keys:
            if not self.store.contains(legacy):
                continue
            value = self.store.get(legacy, None)
            if value is None:
                continue
            logger.info(f"Migration: Schlüssel '{legacy}' → '{key}'")
            self.store.set(key, value)
            return value
        return []

    @staticmethod
    def _parse_records(model, raw, key: str) -> list:
        if not isinstance(raw, list):
            logger.warning(f"Speicher: '{key}' ist keine Liste – ignoriert")
            return []
        records = []
        for i, item in enumerate(raw):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Speicher: '{key}'[{i}] ungültig, übersprungen: {e}")
        return records

    def _save_groups(self) -> None:
        self.store.set(self.storage.groups_key, [g.to_record() for g in self._groups])

    def _save_students(self) -> None:
        self.store.set(
            self.storage.students_key, [s.to_record() for s in self._students]
        )

    # ─── Gruppen ───

    def add_group(self, name: str, monthly_price: float,
                  sessions_per_month: int) -> Group:
        """Legt eine Gruppe an. Ungültige Werte → ValueError, nichts wird gespeichert."""
        group = Group(
            id=self._new_id(),
            name=name,
            monthly_price=monthly_price,
            sessions_per_month=sessions_per_month,
            teacher_sessions=0,
        )
        self._groups.append(group)
        self._save_groups()
        logger.debug(f"Gruppe angelegt: {group.id} ({group.name})")
        return group

    def delete_group(self, group_id: str) -> Optional[int]:
        """Löscht die Gruppe samt ihrer Schüler; liefert die Anzahl gelöschter Schüler."""
        if self.get_group(group_id) is None:
            logger.debug(f"delete_group: unbekannte Gruppe {group_id}")
            return None
        before = len(self._students)
        self._students = [s for s in self._students if s.group_id != group_id]
        self._groups = [g for g in self._groups if g.id != group_id]
        self._save_students()
        self._save_groups()
        return before - len(self._students)

    def increment_teacher_sessions(self, group_id: str) -> Optional[Group]:
        return self._replace_group(
            group_id, lambda g: {"teacher_sessions": g.teacher_sessions + 1}
        )

    def _replace_group(self, group_id: str, changes) -> Optional[Group]:
        for i, g in enumerate(self._groups):
            if g.id == group_id:
                updated = g.model_copy(update=changes(g))
                self._groups[i] = updated
                self._save_groups()
                return updated
        logger.debug(f"Gruppe {group_id} nicht gefunden")
        return None

    # ─── Schüler ───

    def add_student(
        self,
        group_id: str,
        name: str,
        phone: Optional[str] = None,
        individual_price: Optional[float] = None,
    ) -> Optional[Student]:
        """Fügt einen Schüler hinzu; None, wenn die Gruppe nicht existiert."""
        if self.get_group(group_id) is None:
            logger.debug(f"add_student: unbekannte Gruppe {group_id}")
            return None
        student = Student(
            id=self._new_id(),
            name=name,
            group_id=group_id,
            phone=phone,
            sessions_owed=0,
            individual_price=individual_price,
            collected=0,
        )
        self._students.append(student)
        self._save_students()
        return student

    def update_student(self, student_id: str, **fields) -> Optional[Student]:
        """Übernimmt Name, Telefon, Sonderpreis und/oder Sitzungsstand."""
        unknown = set(fields) - EDITABLE_STUDENT_FIELDS
        if unknown:
            raise ValueError(
                f"Nicht änderbare Felder: {', '.join(sorted(unknown))}"
            )
        for i, s in enumerate(self._students):
            if s.id == student_id:
                # Neu validieren, damit z.B. ein leerer Name abgelehnt wird
                updated = Student.model_validate({**s.model_dump(), **fields})
                self._students[i] = updated
                self._save_students()
                return updated
        logger.debug(f"update_student: unbekannter Schüler {student_id}")
        return None

    def delete_student(self, student_id: str) -> bool:
        before = len(self._students)
        self._students = [s for s in self._students if s.id != student_id]
        if len(self._students) == before:
            logger.debug(f"delete_student: unbekannter Schüler {student_id}")
            return False
        self._save_students()
        return True

    def mark_attendance(self, student_id: str) -> Optional[Student]:
        return self._replace_student(
            student_id, lambda s, g: {"sessions_owed": s.sessions_owed + 1}
        )

    def mark_payment(self, student_id: str) -> Optional[Student]:
        """Bucht eine Zyklus-Zahlung zum aktuell gültigen Preis."""
        def _payment(s: Student, g: Group) -> dict:
            price = price_in_effect(s, g)
            return {
                "sessions_owed": s.sessions_owed - g.sessions_per_month,
                "collected": (s.collected or 0) + price,
            }
        return self._replace_student(student_id, _payment)

    def _replace_student(self, student_id: str, changes) -> Optional[Student]:
        for i, s in enumerate(self._students):
            if s.id != student_id:
                continue
            group = self.get_group(s.group_id)
            if group is None:
                logger.debug(f"Schüler {student_id}: Gruppe {s.group_id} fehlt")
                return None
            updated = s.model_copy(update=changes(s, group))
            self._students[i] = updated
            self._save_students()
            return updated
        logger.debug(f"Schüler {student_id} nicht gefunden")
        return None

    # ─── Import ───

    def replace(
        self,
        groups: Optional[list[Group]] = None,
        students: Optional[list[Student]] = None,
    ) -> None:
        """Ersetzt die übergebenen Listen vollständig; None lässt eine Liste unverändert."""
        if groups is not None:
            self._groups = list(groups)
            self._save_groups()
        if students is not None:
            self._students = list(students)
            self._save_students()
        logger.info(
            f"Import: Gruppen {'ersetzt' if groups is not None else 'unverändert'}, "
            f"Schüler {'ersetzt' if students is not None else 'unverändert'}"
        )
