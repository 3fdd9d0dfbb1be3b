"""Konfigurationsmanager: Laden, Speichern und Validieren der App-Konfiguration.

Die Datei wird mit ruamel.yaml geschrieben, damit Abschnittskommentare erhalten bleiben.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── Kopf und Abschnittskommentare ───

_YAML_HEADER = f"""\
# ============================================
# Nachhilfe-Buchhaltung — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "currency": (
        "Währung",
        "Nur eine Währung; das Kürzel wird an alle Beträge angehängt.",
    ),
    "storage": (
        "Datenablage",
        "Ein JSON-Dokument pro Schlüssel im Verzeichnis data_dir.\n"
        "Schlüssel NICHT umbenennen, sonst gehen Daten verloren\n"
        "(alte Schlüssel unter legacy_* werden einmalig migriert).",
    ),
    "defaults": (
        "Vorgaben",
        None,
    ),
    "export": (
        "Export",
        None,
    ),
    "logging": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    """Liest und schreibt die YAML-Konfiguration (Standard: config/tuition_config.yaml)."""

    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "tuition_config.yaml"

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """True, solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.path.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Liest die YAML-Datei; fehlende Abschnitte erhalten ihre Vorgaben.

        Fehlende Datei → FileNotFoundError, ungültiger Inhalt → ValueError.
        """
        source = Path(path) if path is not None else self.path
        if not source.exists():
            raise FileNotFoundError(
                f"Keine Konfiguration unter {source}.\n"
                f"Anlegen mit: python main.py config init"
            )
        raw = yaml.load(source.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{source}: oberste Ebene muss eine Zuordnung sein.")
        try:
            return AppConfig.model_validate(dict(raw))
        except ValidationError as e:
            raise ValueError(f"{source} enthält ungültige Werte:\n{e}") from e

    def load_or_default(self) -> AppConfig:
        if self.first_run_check():
            return default_app_config()
        return self.load()

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None,
             quiet: bool = False) -> None:
        destination = Path(path) if path is not None else self.path
        destination.parent.mkdir(parents=True, exist_ok=True)

        with destination.open("w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(self._build_commented_yaml(config), f)

        if not quiet:
            console.print(f"[green]✓[/green] Konfiguration geschrieben: {destination}")

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        tree = CommentedMap(json.loads(config.model_dump_json()))
        for key, (label, note) in _SECTION_COMMENTS.items():
            if key in tree:
                text = f"\n─── {label} ───"
                if note:
                    text += f"\n{note}"
                tree.yaml_set_comment_before_after_key(key, before=text)
        return tree
