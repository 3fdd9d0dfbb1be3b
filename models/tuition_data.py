"""TuitionData: vollständiger Datenbestand (Gruppen + Schüler) als Pydantic-Modell."""

import json
from pathlib import Path

from pydantic import BaseModel

from models.group import Group
from models.student import Student


class TuitionData(BaseModel):
    """Gruppen und Schüler zusammen; Form des Export-/Import-Dokuments."""

    groups: list[Group] = []
    students: list[Student] = []

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenbestand."""
        with_price = sum(1 for s in self.students if s.individual_price is not None)
        lines = [
            f"Gruppen: {len(self.groups)}",
            f"Schüler: {len(self.students)}"
            + (f" ({with_price} mit Sonderpreis)" if with_price else ""),
            f"Gehaltene Sitzungen: {sum(g.teacher_sessions for g in self.groups)}",
        ]
        return "\n".join(lines)

    def to_document(self) -> dict:
        """Export-Dokument {"groups": [...], "students": [...]} mit camelCase-Feldern."""
        return {
            "groups": [g.to_record() for g in self.groups],
            "students": [s.to_record() for s in self.students],
        }

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den Datenbestand als eingerücktes JSON-Dokument."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_document(), f, indent=2, ensure_ascii=False,
                      allow_nan=False)
