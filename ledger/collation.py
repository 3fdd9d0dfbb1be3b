"""Sprachgerechte Sortierung von Schülernamen (Unicode Collation Algorithm via pyuca).

Die DUCET-Tabelle gibt Alif mit Hamza (أ, إ) eigene Primärgewichte vor dem
blanken Alif. Im Arabischen gelten sie als Alif; sie werden daher für den
Primärschlüssel auf ا abgebildet. Alif mit Madda (آ) bleibt vor ا.
"""

from functools import lru_cache
from typing import Iterable

from pyuca import Collator

from models.student import Student

# أ → ا, إ → ا
_ALEF_FOLDING = str.maketrans({"أ": "ا", "إ": "ا"})


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Lädt die DUCET-Tabelle einmalig (dauert einige hundert ms)
    return Collator()


def name_sort_key(name: str) -> tuple:
    """Sortierschlüssel: gefalteter Name zuerst, der unveränderte Name entscheidet Gleichstände."""
    name = name.strip()
    collator = _collator()
    return (
        collator.sort_key(name.translate(_ALEF_FOLDING)),
        collator.sort_key(name),
    )


def sort_by_name(students: Iterable[Student]) -> list[Student]:
    """Sortiert Schüler alphabetisch nach Namen; bei Gleichstand nach id."""
    return sorted(students, key=lambda s: (name_sort_key(s.name), s.id))
