"""Tests für das Konfigurationssystem und die Datenmodelle."""

import pytest

from config.schema import AppConfig, DefaultsConfig, LoggingConfig, StorageConfig
from config.defaults import (
    DEFAULT_SESSIONS_PER_MONTH,
    default_app_config,
    default_storage,
)
from config.manager import ConfigManager
from models import Group, Student, TuitionData


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_app_config_valid(self):
        """Vollständige Default-Config ist valide."""
        config = default_app_config()
        assert config.currency == "DA"
        assert config.defaults.sessions_per_month == DEFAULT_SESSIONS_PER_MONTH == 4
        assert config.logging.level == "WARNING"

    def test_default_storage_keys(self):
        """Kanonische Schlüssel und alte Schlüssel für die Migration."""
        st = default_storage()
        assert st.groups_key == "tuition_groups"
        assert st.students_key == "tuition_students"
        assert st.legacy_groups_keys == ["groups"]
        assert st.legacy_students_keys == ["students"]


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_blank_storage_key_raises(self):
        with pytest.raises(Exception):
            StorageConfig(groups_key="  ")

    def test_sessions_per_month_must_be_positive(self):
        with pytest.raises(Exception):
            DefaultsConfig(sessions_per_month=0)

    def test_log_level_normalised(self):
        assert LoggingConfig(level="info").level == "INFO"

    def test_unknown_log_level_raises(self):
        with pytest.raises(Exception):
            LoggingConfig(level="LAUT")

    def test_group_camel_case_aliases(self):
        g = Group.model_validate({"id": "g1", "name": "A", "monthlyPrice": 10,
                                  "sessionsPerMonth": 2})
        assert g.monthly_price == 10
        assert g.session_price == 5
        assert g.to_record()["teacherSessions"] == 0

    def test_group_name_is_stripped(self):
        g = Group(id="g1", name="  Mathe ", monthly_price=1, sessions_per_month=1)
        assert g.name == "Mathe"

    def test_sessions_must_be_integer(self):
        with pytest.raises(Exception):
            Group(id="g1", name="A", monthly_price=1, sessions_per_month=2.5)

    def test_student_negative_price_raises(self):
        with pytest.raises(Exception):
            Student(id="s1", name="A", group_id="g1", individual_price=-5)

    def test_student_sessions_owed_may_be_negative(self):
        assert Student(id="s1", name="A", group_id="g1", sessions_owed=-12).sessions_owed == -12

    def test_tuition_data_summary(self):
        data = TuitionData(
            groups=[Group(id="g1", name="A", monthly_price=1, sessions_per_month=1,
                          teacher_sessions=3)],
            students=[Student(id="s1", name="B", group_id="g1", individual_price=5)],
        )
        summary = data.summary()
        assert "Gruppen: 1" in summary
        assert "Schüler: 1 (1 mit Sonderpreis)" in summary
        assert "Gehaltene Sitzungen: 3" in summary


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path):
        path = tmp_path / "tuition_config.yaml"
        mgr = ConfigManager(path)
        assert mgr.first_run_check()

        config = default_app_config().model_copy(update={"currency": "EUR"})
        mgr.save(config, quiet=True)

        assert not mgr.first_run_check()
        loaded = mgr.load()
        assert loaded == config

    def test_saved_file_has_comments(self, tmp_path):
        path = tmp_path / "c.yaml"
        ConfigManager(path).save(default_app_config(), quiet=True)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Datenablage ───" in text

    def test_load_or_default_without_file(self, tmp_path):
        mgr = ConfigManager(tmp_path / "fehlt.yaml")
        assert mgr.load_or_default() == default_app_config()

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "fehlt.yaml").load()

    def test_invalid_file_raises_value_error(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("currency: ''\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager(path).load()

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("currency: EUR\n", encoding="utf-8")
        config = ConfigManager(path).load()
        assert isinstance(config, AppConfig)
        assert config.currency == "EUR"
        assert config.storage == StorageConfig()
