from config.schema import (
    AppConfig,
    DefaultsConfig,
    ExportConfig,
    LoggingConfig,
    StorageConfig,
)


# Sitzungen pro Abrechnungszyklus der ursprünglichen App (Formular-Vorgabe "4")
DEFAULT_SESSIONS_PER_MONTH = 4

# Schlüssel früherer Versionen; werden beim ersten Laden auf die kanonischen
# Schlüssel umgeschrieben.
LEGACY_GROUPS_KEYS = ["groups"]
LEGACY_STUDENTS_KEYS = ["students"]


def default_storage() -> StorageConfig:
    """Standard-Ablage: ./data_store/tuition_groups.json + tuition_students.json."""
    return StorageConfig(
        data_dir="data_store",
        groups_key="tuition_groups",
        students_key="tuition_students",
        legacy_groups_keys=list(LEGACY_GROUPS_KEYS),
        legacy_students_keys=list(LEGACY_STUDENTS_KEYS),
    )


def default_app_config() -> AppConfig:
    """Vollständige Standard-Konfiguration (Dinar, 4 Sitzungen pro Monat)."""
    return AppConfig(
        currency="DA",
        storage=default_storage(),
        defaults=DefaultsConfig(sessions_per_month=DEFAULT_SESSIONS_PER_MONTH),
        export=ExportConfig(output_dir="output"),
        logging=LoggingConfig(level="WARNING"),
    )
