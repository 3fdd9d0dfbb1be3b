"""Schlüssel-Wert-Ablage: ein JSON-Dokument pro Schlüssel in einem Verzeichnis.

Lese- und Schreibfehler werden protokolliert und verschluckt; der Speicher im
Arbeitsspeicher bleibt für den Rest des Aufrufs maßgeblich.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonStore:
    """get/set über `<data_dir>/<key>.json`."""

    SUFFIX = ".json"

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}{self.SUFFIX}"

    def contains(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def get(self, key: str, default: Any = None) -> Any:
        """Liest den Wert zu `key`; bei fehlender oder defekter Datei `default`."""
        path = self.path_for(key)
        if not path.is_file():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Speicher: '{key}' nicht lesbar ({e}) – verwende Vorgabewert")
            return default

    def set(self, key: str, value: Any) -> bool:
        """Schreibt `value` atomar; gibt False zurück, wenn das Schreiben scheiterte."""
        path = self.path_for(key)
        tmp_path = None
        try:
            payload = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=str(path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, path)
            tmp_path = None
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Speicher: '{key}' konnte nicht geschrieben werden ({e})")
            return False
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
