"""Tests für die Kommandozeile (click CliRunner, Daten in tmp_path)."""

import json

import pytest
from click.testing import CliRunner

from config.defaults import default_app_config
from config.manager import ConfigManager
from data.repository import TuitionRepository
from data.store import JsonStore
from main import cli


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def env(tmp_path):
    """Schreibt eine Config mit Datenverzeichnis in tmp_path."""
    config = default_app_config()
    config = config.model_copy(update={
        "storage": config.storage.model_copy(
            update={"data_dir": str(tmp_path / "daten")}),
        "export": config.export.model_copy(
            update={"output_dir": str(tmp_path / "out")}),
    })
    config_path = tmp_path / "config.yaml"
    ConfigManager(config_path).save(config, quiet=True)
    return config_path, config


def _run(env, *args, input=None):
    config_path, _ = env
    result = CliRunner().invoke(cli, ["--config", str(config_path), *args],
                                input=input, obj={})
    return result


def _repo(env) -> TuitionRepository:
    _, config = env
    return TuitionRepository(JsonStore(config.storage.data_dir), config.storage).load()


# ─── ABLÄUFE ──────────────────────────────────────────────────────────────────

class TestWorkflow:
    def test_group_student_attend_pay(self, env):
        assert _run(env, "group", "add", "Mathe", "--price", "2000").exit_code == 0
        group = _repo(env).groups[0]
        assert group.sessions_per_month == 4

        assert _run(env, "student", "add", group.id[:6], "Ali",
                    "--phone", "0555").exit_code == 0
        student = _repo(env).students[0]

        for _ in range(5):
            assert _run(env, "student", "attend", student.id).exit_code == 0
        result = _run(env, "student", "pay", student.id)
        assert result.exit_code == 0, result.output
        assert "2000.00 DA" in result.output

        stored = _repo(env).get_student(student.id)
        assert stored.sessions_owed == 1
        assert stored.collected == 2000

    def test_group_show_and_debtors_only(self, env):
        _run(env, "group", "add", "Mathe", "--price", "2000")
        gid = _repo(env).groups[0].id
        _run(env, "student", "add", gid, "Ali")
        _run(env, "student", "add", gid, "Sara")
        ali = next(s for s in _repo(env).students if s.name == "Ali")
        _run(env, "student", "edit", ali.id, "--sessions", "4")

        result = _run(env, "group", "show", gid)
        assert result.exit_code == 0
        assert "Ali" in result.output and "Sara" in result.output

        result = _run(env, "group", "show", gid, "--debtors-only")
        assert "Ali" in result.output
        assert "Sara" not in result.output

    def test_group_list_shows_outstanding_and_credit(self, env, monkeypatch):
        """Offen = sessions_owed > 0 × Sitzungspreis, Guthaben analog."""
        import main
        monkeypatch.setattr(main.console, "width", 200)

        _run(env, "group", "add", "Mathe", "--price", "2000")
        gid = _repo(env).groups[0].id
        _run(env, "student", "add", gid, "Ali")
        _run(env, "student", "add", gid, "Sara")
        by_name = {s.name: s for s in _repo(env).students}
        _run(env, "student", "edit", by_name["Ali"].id, "--sessions", "6")
        _run(env, "student", "edit", by_name["Sara"].id, "--sessions", "-2")

        result = _run(env, "group", "list")
        assert result.exit_code == 0
        assert "Offen" in result.output and "Guthaben" in result.output
        assert "3000.00" in result.output
        assert "1000.00" in result.output

    def test_teach_increments(self, env):
        _run(env, "group", "add", "Mathe", "--price", "2000")
        gid = _repo(env).groups[0].id
        _run(env, "group", "teach", gid)
        _run(env, "group", "teach", gid)
        assert _repo(env).groups[0].teacher_sessions == 2

    def test_delete_group_requires_confirmation(self, env):
        _run(env, "group", "add", "Mathe", "--price", "2000")
        gid = _repo(env).groups[0].id
        _run(env, "student", "add", gid, "Ali")

        result = _run(env, "group", "delete", gid, input="n\n")
        assert "Abgebrochen" in result.output
        assert len(_repo(env).groups) == 1

        result = _run(env, "group", "delete", gid, "--yes")
        assert result.exit_code == 0
        repo = _repo(env)
        assert repo.groups == [] and repo.students == []

    def test_student_edit_and_delete(self, env):
        _run(env, "group", "add", "Mathe", "--price", "2000")
        gid = _repo(env).groups[0].id
        _run(env, "student", "add", gid, "Ali", "--price", "1500")
        sid = _repo(env).students[0].id

        assert _run(env, "student", "edit", sid, "--name", "Ali B.",
                    "--clear-price").exit_code == 0
        s = _repo(env).get_student(sid)
        assert s.name == "Ali B." and s.individual_price is None

        assert _run(env, "student", "delete", sid, "--yes").exit_code == 0
        assert _repo(env).students == []

    def test_dashboard(self, env):
        _run(env, "generate", "--seed", "3")
        result = _run(env, "dashboard")
        assert result.exit_code == 0
        assert "Dashboard" in result.output


# ─── FEHLERFÄLLE ──────────────────────────────────────────────────────────────

class TestErrors:
    def test_invalid_sessions_rejected(self, env):
        result = _run(env, "group", "add", "Mathe", "--price", "2000",
                      "--sessions", "0")
        assert result.exit_code == 1
        assert _repo(env).groups == []

    def test_empty_student_name_rejected(self, env):
        _run(env, "group", "add", "Mathe", "--price", "2000")
        gid = _repo(env).groups[0].id
        result = _run(env, "student", "add", gid, "  ")
        assert result.exit_code == 1
        assert _repo(env).students == []

    def test_unknown_ids(self, env):
        assert _run(env, "student", "attend", "nix").exit_code == 1
        assert _run(env, "group", "show", "nix").exit_code == 1

    def test_empty_reference_matches_nothing(self, env):
        """Eine leere ID passt nicht auf jede Gruppe."""
        _run(env, "group", "add", "Mathe", "--price", "2000")
        result = _run(env, "group", "delete", "", "--yes")
        assert result.exit_code == 1
        assert len(_repo(env).groups) == 1

    def test_infinite_price_rejected(self, env):
        result = _run(env, "group", "add", "Mathe", "--price", "inf")
        assert result.exit_code == 1
        assert _repo(env).groups == []

    def test_invalid_config_aborts(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("currency: ''\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(path), "dashboard"], obj={})
        assert result.exit_code == 1


# ─── EXPORT / IMPORT / BERICHT ────────────────────────────────────────────────

class TestTransferCommands:
    def test_export_then_import_roundtrip(self, env, tmp_path):
        _run(env, "generate", "--seed", "1")
        before = _repo(env)

        result = _run(env, "export")
        assert result.exit_code == 0
        exported = list((tmp_path / "out").glob("tuition-*.json"))
        assert len(exported) == 1

        _run(env, "generate", "--seed", "2", "--yes")
        result = _run(env, "import", str(exported[0]), "--yes")
        assert result.exit_code == 0, result.output

        after = _repo(env)
        assert after.groups == before.groups
        assert after.students == before.students

    def test_import_partial_keeps_students(self, env, tmp_path):
        _run(env, "generate", "--seed", "1")
        students_before = _repo(env).students

        doc = tmp_path / "nur_gruppen.json"
        doc.write_text(json.dumps({"groups": [
            {"id": "neu", "name": "Neu", "monthlyPrice": 1000, "sessionsPerMonth": 4}
        ]}), encoding="utf-8")
        assert _run(env, "import", str(doc), "--yes").exit_code == 0

        repo = _repo(env)
        assert [g.id for g in repo.groups] == ["neu"]
        assert repo.students == students_before

    def test_import_invalid_leaves_state(self, env, tmp_path):
        _run(env, "generate", "--seed", "1")
        before = _repo(env).groups

        doc = tmp_path / "kaputt.json"
        doc.write_text("{nicht json", encoding="utf-8")
        result = _run(env, "import", str(doc), "--yes")
        assert result.exit_code == 1
        assert "Import fehlgeschlagen" in result.output
        assert _repo(env).groups == before

    def test_import_declined(self, env, tmp_path):
        doc = tmp_path / "leer.json"
        doc.write_text('{"groups": [], "students": []}', encoding="utf-8")
        _run(env, "generate", "--seed", "1")
        result = _run(env, "import", str(doc), input="n\n")
        assert "Abgebrochen" in result.output
        assert _repo(env).groups != []

    def test_report_text_and_files(self, env, tmp_path):
        _run(env, "generate", "--seed", "1")
        out = tmp_path / "berichte"
        out.mkdir()
        result = _run(env, "report", "--text", "--output", str(out),
                      "--excel", str(out))
        assert result.exit_code == 0, result.output
        assert "Gesamt eingenommen" in result.output
        assert len(list(out.glob("finanzbericht-*.txt"))) == 1
        assert len(list(out.glob("finanzbericht-*.xlsx"))) == 1
