"""Datensicherung: Export des gesamten Bestands als JSON und Import mit Prüfung.

Export-Format: {"groups": [...], "students": [...]} (camelCase-Felder).
Beim Import darf jeder der beiden Schlüssel fehlen; vorhandene Listen ersetzen
den Bestand vollständig. Ein fehlerhaftes Dokument ändert nichts.
"""

import json
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ValidationError

from models.group import Group
from models.student import Student
from models.tuition_data import TuitionData


class ImportFormatError(Exception):
    """Import-Dokument ist kein gültiger Datenbestand."""


def _reject_constant(token: str):
    # NaN, Infinity und -Infinity sind kein JSON
    raise ValueError(f"ungültiger Zahlenwert {token}")


class ImportPayload(BaseModel):
    """Geprüfter Import-Inhalt; None = Schlüssel fehlte im Dokument."""

    groups: Optional[list[Group]] = None
    students: Optional[list[Student]] = None

    def summary(self) -> str:
        parts = []
        if self.groups is not None:
            parts.append(f"{len(self.groups)} Gruppen")
        if self.students is not None:
            parts.append(f"{len(self.students)} Schüler")
        return ", ".join(parts)


# ─── Export ───────────────────────────────────────────────────────────────────

def build_export_document(groups: Iterable[Group],
                          students: Iterable[Student]) -> dict:
    return TuitionData(groups=list(groups), students=list(students)).to_document()


def export_filename(day: Optional[date] = None) -> str:
    """'tuition-2024-03-01.json' – Datum im ISO-Format."""
    day = day or date.today()
    return f"tuition-{day.isoformat()}.json"


def write_export(groups: Iterable[Group], students: Iterable[Student],
                 directory: Path, day: Optional[date] = None) -> Path:
    """Schreibt das Export-Dokument nach `directory` und gibt den Pfad zurück."""
    path = Path(directory) / export_filename(day)
    TuitionData(groups=list(groups), students=list(students)).save_json(path)
    return path


# ─── Import ───────────────────────────────────────────────────────────────────

def parse_import_document(text: str) -> ImportPayload:
    """Prüft ein Import-Dokument vollständig, bevor irgendetwas ersetzt wird."""
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise ImportFormatError(f"Kein gültiges JSON: {e}") from e

    if not isinstance(data, dict):
        raise ImportFormatError("Dokument muss ein JSON-Objekt sein.")
    if "groups" not in data and "students" not in data:
        raise ImportFormatError(
            "Dokument enthält weder 'groups' noch 'students'."
        )

    for key in ("groups", "students"):
        if key in data and not isinstance(data[key], list):
            raise ImportFormatError(f"'{key}' muss eine Liste sein.")

    try:
        return ImportPayload.model_validate({
            key: data[key] for key in ("groups", "students") if key in data
        })
    except ValidationError as e:
        raise ImportFormatError(f"Ungültige Einträge:\n{e}") from e


def read_import_file(path: Path) -> ImportPayload:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFormatError(f"Datei nicht lesbar: {path} ({e})") from e
    return parse_import_document(text)
