from pydantic import BaseModel, Field, field_validator


# ─── SPEICHER ───

class StorageConfig(BaseModel):
    """Ablage der Datenbestände als JSON-Dokumente (ein Dokument pro Schlüssel)."""
    # Verzeichnis, in dem die JSON-Dokumente liegen
    data_dir: str = Field("data_store",
        description="Verzeichnis für die gespeicherten Datenbestände")
    # Kanonischer Schlüssel für die Gruppenliste
    groups_key: str = Field("tuition_groups",
        description="Speicherschlüssel der Gruppen")
    # Kanonischer Schlüssel für die Schülerliste
    students_key: str = Field("tuition_students",
        description="Speicherschlüssel der Schüler")
    # Ältere Schlüssel, die einmalig migriert werden, falls der kanonische fehlt
    legacy_groups_keys: list[str] = Field(
        default=["groups"],
        description="Alte Schlüssel der Gruppen (Migration)")
    legacy_students_keys: list[str] = Field(
        default=["students"],
        description="Alte Schlüssel der Schüler (Migration)")

    @field_validator("groups_key", "students_key")
    @classmethod
    def _key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Speicherschlüssel darf nicht leer sein")
        return v.strip()


# ─── VORGABEN ───

class DefaultsConfig(BaseModel):
    """Vorgabewerte für neue Gruppen."""
    # Sitzungen pro Abrechnungszyklus, wenn beim Anlegen nichts angegeben wird
    sessions_per_month: int = Field(4, ge=1, le=31,
        description="Standard-Sitzungen pro Monat für neue Gruppen")


# ─── EXPORT ───

class ExportConfig(BaseModel):
    """Zielverzeichnis für Export-Dateien (JSON, Bericht, Excel)."""
    output_dir: str = Field("output",
        description="Ausgabeverzeichnis für Exporte")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    # Python-Logging-Level für die Konsole
    level: str = Field("WARNING",
        description="Log-Level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return level


# ─── GESAMTKONFIGURATION ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Nachhilfe-Buchhaltung."""
    # Einzige Währung; wird nur zur Anzeige an Beträge angehängt
    currency: str = Field("DA", min_length=1,
        description="Währungskürzel für alle Beträge")
    storage: StorageConfig = Field(default_factory=StorageConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
