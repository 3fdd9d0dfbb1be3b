"""Gemeinsame Hilfsfunktionen für Bericht- und Excel-Export."""

from datetime import date
from pathlib import Path
from typing import Optional

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header": "4472C4",
    "debt":   "FF9999",
    "total":  "DDDDDD",
}


def report_filename_stem(day: Optional[date] = None) -> str:
    """'finanzbericht-2024-03-01' – Dateiname ohne Endung."""
    day = day or date.today()
    return f"finanzbericht-{day.isoformat()}"


def write_text_report(text: str, output_path: Path,
                      day: Optional[date] = None) -> Path:
    """Schreibt den Klartext-Bericht; ein Verzeichnis erhält den Standard-Dateinamen."""
    output_path = Path(output_path)
    if output_path.is_dir():
        output_path = output_path / f"{report_filename_stem(day)}.txt"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(text)
    return output_path
