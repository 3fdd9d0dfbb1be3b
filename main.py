"""Nachhilfe-Buchhaltung — Haupt-CLI.

Verwendung:
  python main.py config init                      Konfiguration anlegen
  python main.py config show                      Konfiguration anzeigen
  python main.py dashboard                        Übersicht (Schulden, Guthaben, Saldo)
  python main.py group add <name> --price 2000    Gruppe anlegen
  python main.py group list                       Gruppen auflisten
  python main.py group show <gruppe>              Schülerliste einer Gruppe
  python main.py group teach <gruppe>             Gehaltene Sitzung zählen
  python main.py group delete <gruppe>            Gruppe samt Schülern löschen
  python main.py student add <gruppe> <name>      Schüler hinzufügen
  python main.py student attend <schüler>         Anwesenheit eintragen
  python main.py student pay <schüler>            Zahlung eines Zyklus buchen
  python main.py student edit <schüler> ...       Schüler bearbeiten
  python main.py student delete <schüler>         Schüler löschen
  python main.py report                           Finanzbericht
  python main.py export                           Datensicherung als JSON
  python main.py import <datei.json>              Datensicherung einspielen
  python main.py generate                         Beispieldaten laden

Gruppen und Schüler werden über ihre ID oder einen eindeutigen ID-Anfang angegeben.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def _describe_error(e: Exception) -> str:
    """Kurzfassung von Pydantic-Fehlern (ohne URL und Eingabe-Dump)."""
    if isinstance(e, ValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
    return str(e)


def _config_manager(ctx: click.Context):
    from config.manager import ConfigManager
    return ConfigManager(ctx.obj.get("config_path"))


def _open_repository(ctx: click.Context):
    """Lädt Konfiguration und Datenbestand."""
    from data.repository import TuitionRepository
    from data.store import JsonStore

    config = ctx.obj["config"]
    store = JsonStore(Path(config.storage.data_dir))
    return TuitionRepository(store, config.storage).load()


def _resolve(items, ref: str, kind: str):
    """Sucht per exakter ID oder eindeutigem ID-Anfang; bricht sonst ab."""
    if not ref.strip():
        _fail(f"{kind}: leere ID angegeben.")
    exact = [x for x in items if x.id == ref]
    if exact:
        return exact[0]
    matches = [x for x in items if x.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        _fail(f"{kind} '{ref}' nicht gefunden.")
    _fail(f"{kind} '{ref}' ist nicht eindeutig ({len(matches)} Treffer).")


def _money(value: float, currency: str) -> str:
    return f"{value:.2f} {currency}"


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anlegen oder anzeigen."""


@cmd_config.command("init")
@click.option("--currency", default=None, help="Währungskürzel (Standard: DA).")
@click.option("--data-dir", default=None, help="Verzeichnis für die Datenbestände.")
@click.option("--force", is_flag=True, default=False,
              help="Vorhandene Konfiguration überschreiben.")
@click.pass_context
def config_init(ctx, currency: Optional[str], data_dir: Optional[str], force: bool):
    """Schreibt die Standard-Konfiguration als YAML."""
    from config.defaults import default_app_config

    mgr = _config_manager(ctx)
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return

    config = default_app_config()
    if currency:
        config = config.model_copy(update={"currency": currency})
    if data_dir:
        config = config.model_copy(update={
            "storage": config.storage.model_copy(update={"data_dir": data_dir})
        })
    mgr.save(config)


@cmd_config.command("show")
@click.pass_context
def config_show(ctx):
    """Zeigt die aktuelle Konfiguration an."""
    config = ctx.obj["config"]
    st = config.storage

    table = Table(title="Konfiguration", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Währung", config.currency)
    table.add_row("Datenverzeichnis", st.data_dir)
    table.add_row("Schlüssel Gruppen", st.groups_key)
    table.add_row("Schlüssel Schüler", st.students_key)
    table.add_row("Alte Schlüssel",
                  ", ".join(st.legacy_groups_keys + st.legacy_students_keys) or "–")
    table.add_row("Sitzungen/Monat (Vorgabe)", str(config.defaults.sessions_per_month))
    table.add_row("Export-Verzeichnis", config.export.output_dir)
    table.add_row("Log-Level", config.logging.level)
    console.print(table)


# ─── DASHBOARD ────────────────────────────────────────────────────────────────

@click.command("dashboard")
@click.pass_context
def cmd_dashboard(ctx):
    """Übersicht: Gruppen, Schüler, Schuldner, offene Beträge und Guthaben."""
    from ledger import dashboard_totals

    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    totals = dashboard_totals(repo.groups, repo.students)
    cur = config.currency

    net_color = "green" if totals.net >= 0 else "red"
    console.print(Panel(
        f"Gruppen: [bold]{totals.group_count}[/bold] | "
        f"Schüler: [bold]{totals.student_count}[/bold] | "
        f"Schuldner: [bold red]{totals.debtor_count}[/bold red]\n"
        f"Offen: [red]{_money(totals.outstanding_total, cur)}[/red] | "
        f"Guthaben: [green]{_money(totals.credit_total, cur)}[/green]\n"
        f"Saldo: [{net_color}]{_money(totals.net, cur)}[/{net_color}]",
        title="Dashboard",
        border_style="cyan",
    ))


# ─── GROUP ────────────────────────────────────────────────────────────────────

@click.group("group")
def cmd_group():
    """Gruppen verwalten."""


@cmd_group.command("add")
@click.argument("name")
@click.option("--price", type=float, required=True, help="Preis pro Monat.")
@click.option("--sessions", type=int, default=None,
              help="Sitzungen pro Monat (Standard aus der Konfiguration).")
@click.pass_context
def group_add(ctx, name: str, price: float, sessions: Optional[int]):
    """Legt eine neue Gruppe an."""
    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    if sessions is None:
        sessions = config.defaults.sessions_per_month
    try:
        group = repo.add_group(name, price, sessions)
    except ValueError as e:
        _fail(f"Gruppe nicht angelegt: {_describe_error(e)}")
    console.print(f"[green]✓[/green] Gruppe angelegt: [bold]{group.name}[/bold] "
                  f"[dim]({group.id})[/dim]")


@cmd_group.command("list")
@click.pass_context
def group_list(ctx):
    """Listet alle Gruppen mit Kennzahlen, offenen Beträgen und Guthaben auf."""
    from ledger import build_group_finance_stats, debtors_of, group_balance

    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    if not repo.groups:
        console.print("[dim]Keine Gruppen vorhanden.[/dim]")
        return

    table = Table(title="Gruppen", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Schüler", justify="right")
    table.add_column("Preis", justify="right")
    table.add_column("Sitzungen", justify="right")
    table.add_column("Gehalten", justify="right")
    table.add_column("Schuldner", justify="right")
    table.add_column("Offen", justify="right", style="red")
    table.add_column("Guthaben", justify="right", style="green")
    for st in build_group_finance_stats(repo.groups, repo.students):
        g = st.group
        n_debtors = len(debtors_of(g, repo.students))
        balance = group_balance(g, repo.students)
        table.add_row(
            g.id[:8], g.name, str(st.student_count),
            _money(g.monthly_price, config.currency),
            str(g.sessions_per_month), str(g.teacher_sessions),
            f"[red]{n_debtors}[/red]" if n_debtors else "0",
            f"{balance.outstanding:.2f}", f"{balance.credit:.2f}",
        )
    console.print(table)


@cmd_group.command("show")
@click.argument("group_ref")
@click.option("--debtors-only", is_flag=True, default=False,
              help="Nur Schuldner anzeigen.")
@click.pass_context
def group_show(ctx, group_ref: str, debtors_only: bool):
    """Zeigt die Schülerliste einer Gruppe mit Status."""
    from ledger import debtors_of, sort_by_name, student_status, StatusKind

    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    group = _resolve(repo.groups, group_ref, "Gruppe")

    if debtors_only:
        students = debtors_of(group, repo.students)
    else:
        students = sort_by_name(repo.students_of(group.id))

    console.print(Panel(
        f"[bold]{group.name}[/bold]\n"
        f"Preis: {_money(group.monthly_price, config.currency)} | "
        f"{group.sessions_per_month} Sitzungen | "
        f"Sitzungspreis: {_money(group.session_price, config.currency)} | "
        f"Gehalten: {group.teacher_sessions}",
        border_style="cyan",
    ))

    if not students:
        console.print("[dim]Keine Schuldner.[/dim]" if debtors_only
                      else "[dim]Keine Schüler in dieser Gruppe.[/dim]")
        return

    colors = {StatusKind.DEBT: "red", StatusKind.CREDIT: "green",
              StatusKind.NEUTRAL: "white"}
    table = Table(box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Telefon")
    table.add_column("Sitzungen", justify="right")
    table.add_column("Sonderpreis", justify="right")
    table.add_column("Status")
    table.add_column("Wert", justify="right")
    for s in students:
        status = student_status(s, group)
        color = colors[status.kind]
        table.add_row(
            s.id[:8], s.name, s.phone or "", str(s.sessions_owed),
            _money(s.individual_price, config.currency)
            if s.individual_price is not None else "",
            f"[{color}]{status.label}[/{color}]",
            f"[{color}]{status.display(config.currency)}[/{color}]",
        )
    console.print(table)


@cmd_group.command("teach")
@click.argument("group_ref")
@click.pass_context
def group_teach(ctx, group_ref: str):
    """Zählt eine gehaltene Sitzung für die Gruppe."""
    repo = _open_repository(ctx)
    group = _resolve(repo.groups, group_ref, "Gruppe")
    updated = repo.increment_teacher_sessions(group.id)
    console.print(f"[green]✓[/green] {updated.name}: "
                  f"{updated.teacher_sessions} gehaltene Sitzungen")


@cmd_group.command("delete")
@click.argument("group_ref")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
def group_delete(ctx, group_ref: str, yes: bool):
    """Löscht eine Gruppe und alle ihre Schüler."""
    repo = _open_repository(ctx)
    group = _resolve(repo.groups, group_ref, "Gruppe")
    count = len(repo.students_of(group.id))
    if not yes and not click.confirm(
        f"Gruppe '{group.name}' mit {count} Schülern löschen?", default=False
    ):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return
    removed = repo.delete_group(group.id)
    console.print(f"[green]✓[/green] Gruppe gelöscht ({removed} Schüler entfernt).")


# ─── STUDENT ──────────────────────────────────────────────────────────────────

@click.group("student")
def cmd_student():
    """Schüler verwalten, Anwesenheit und Zahlungen buchen."""


@cmd_student.command("add")
@click.argument("group_ref")
@click.argument("name")
@click.option("--phone", default=None, help="Telefonnummer (optional).")
@click.option("--price", type=float, default=None,
              help="Sonderpreis pro Monat (sonst Gruppenpreis).")
@click.pass_context
def student_add(ctx, group_ref: str, name: str, phone: Optional[str],
                price: Optional[float]):
    """Fügt einer Gruppe einen Schüler hinzu."""
    repo = _open_repository(ctx)
    group = _resolve(repo.groups, group_ref, "Gruppe")
    try:
        student = repo.add_student(group.id, name, phone=phone,
                                   individual_price=price)
    except ValueError as e:
        _fail(f"Schüler nicht angelegt: {_describe_error(e)}")
    console.print(f"[green]✓[/green] {student.name} → {group.name} "
                  f"[dim]({student.id})[/dim]")


@cmd_student.command("edit")
@click.argument("student_ref")
@click.option("--name", default=None, help="Neuer Name.")
@click.option("--phone", default=None, help="Telefonnummer ('' zum Entfernen).")
@click.option("--price", type=float, default=None, help="Neuer Sonderpreis.")
@click.option("--clear-price", is_flag=True, default=False,
              help="Sonderpreis entfernen (Gruppenpreis gilt).")
@click.option("--sessions", type=int, default=None,
              help="Sitzungsstand direkt korrigieren.")
@click.pass_context
def student_edit(ctx, student_ref: str, name: Optional[str], phone: Optional[str],
                 price: Optional[float], clear_price: bool, sessions: Optional[int]):
    """Ändert Name, Telefon, Sonderpreis oder Sitzungsstand."""
    repo = _open_repository(ctx)
    student = _resolve(repo.students, student_ref, "Schüler")

    fields = {}
    if name is not None:
        fields["name"] = name
    if phone is not None:
        fields["phone"] = phone
    if clear_price:
        fields["individual_price"] = None
    elif price is not None:
        fields["individual_price"] = price
    if sessions is not None:
        fields["sessions_owed"] = sessions
    if not fields:
        console.print("[yellow]Keine Änderungen angegeben.[/yellow]")
        return

    try:
        updated = repo.update_student(student.id, **fields)
    except ValueError as e:
        _fail(f"Schüler nicht geändert: {_describe_error(e)}")
    console.print(f"[green]✓[/green] {updated.name} aktualisiert.")


@cmd_student.command("delete")
@click.argument("student_ref")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
def student_delete(ctx, student_ref: str, yes: bool):
    """Löscht einen Schüler endgültig."""
    repo = _open_repository(ctx)
    student = _resolve(repo.students, student_ref, "Schüler")
    if not yes and not click.confirm(f"'{student.name}' endgültig löschen?",
                                     default=False):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return
    repo.delete_student(student.id)
    console.print(f"[green]✓[/green] {student.name} gelöscht.")


@cmd_student.command("attend")
@click.argument("student_ref")
@click.pass_context
def student_attend(ctx, student_ref: str):
    """Trägt eine besuchte Sitzung ein."""
    repo = _open_repository(ctx)
    student = _resolve(repo.students, student_ref, "Schüler")
    updated = repo.mark_attendance(student.id)
    if updated is None:
        _fail(f"Gruppe von '{student.name}' existiert nicht mehr.")
    console.print(f"[green]✓[/green] {updated.name}: {updated.sessions_owed} Sitzungen offen")


@cmd_student.command("pay")
@click.argument("student_ref")
@click.pass_context
def student_pay(ctx, student_ref: str):
    """Bucht die Zahlung eines Abrechnungszyklus."""
    from ledger import student_status

    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    student = _resolve(repo.students, student_ref, "Schüler")
    updated = repo.mark_payment(student.id)
    if updated is None:
        _fail(f"Gruppe von '{student.name}' existiert nicht mehr.")
    paid = updated.collected - student.collected
    status = student_status(updated, repo.get_group(updated.group_id))
    console.print(
        f"[green]✓[/green] Zahlung {_money(paid, config.currency)} gebucht – "
        f"{updated.name}: {status.label} ({status.display(config.currency)})"
    )


# ─── REPORT ───────────────────────────────────────────────────────────────────

@click.command("report")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Klartext-Bericht in Datei/Verzeichnis schreiben.")
@click.option("--excel", type=click.Path(path_type=Path), default=None,
              help="Bericht als Excel-Datei/Verzeichnis exportieren.")
@click.option("--text", "as_text", is_flag=True, default=False,
              help="Klartext statt Tabellen ausgeben.")
@click.pass_context
def cmd_report(ctx, output: Optional[Path], excel: Optional[Path], as_text: bool):
    """Finanzbericht: Einnahmen pro Gruppe und Schuldnerlisten."""
    from analysis.financial_report import FinancialReportBuilder
    from export import ExcelExporter, write_text_report

    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    report = FinancialReportBuilder(config.currency).build(repo.groups, repo.students)

    if as_text:
        click.echo(report.render_text())
    else:
        report.print_rich()

    if output is not None:
        path = write_text_report(report.render_text(), output, report.report_date)
        console.print(f"[green]✓[/green] Bericht gespeichert: {path}")
    if excel is not None:
        path = ExcelExporter(report).export(excel)
        console.print(f"[green]✓[/green] Excel gespeichert: {path}")


# ─── EXPORT / IMPORT ──────────────────────────────────────────────────────────

@click.command("export")
@click.option("--dir", "directory", type=click.Path(path_type=Path), default=None,
              help="Zielverzeichnis (Standard aus der Konfiguration).")
@click.pass_context
def cmd_export(ctx, directory: Optional[Path]):
    """Sichert alle Gruppen und Schüler in eine JSON-Datei."""
    from data.transfer import write_export

    config = ctx.obj["config"]
    repo = _open_repository(ctx)
    target = directory or Path(config.export.output_dir)
    path = write_export(repo.groups, repo.students, target)
    console.print(f"[green]✓[/green] Export gespeichert: {path}")


@click.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage ersetzen.")
@click.pass_context
def cmd_import(ctx, datei: Path, yes: bool):
    """Spielt eine JSON-Datensicherung ein (ersetzt die enthaltenen Listen)."""
    from data.transfer import ImportFormatError, read_import_file

    repo = _open_repository(ctx)
    console.print(f"[bold]Importiere:[/bold] {datei}")
    try:
        payload = read_import_file(datei)
    except ImportFormatError as e:
        _fail(f"Import fehlgeschlagen:\n{e}")

    if not yes and not click.confirm(
        f"Aktuelle Daten ersetzen ({payload.summary()})?", default=False
    ):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return

    repo.replace(groups=payload.groups, students=payload.students)
    console.print(f"[green]✓[/green] Import erfolgreich: {payload.summary()}")


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage ersetzen.")
@click.pass_context
def cmd_generate(ctx, seed: int, yes: bool):
    """Ersetzt den Datenbestand durch Beispieldaten."""
    from data.fake_data import FakeDataGenerator

    repo = _open_repository(ctx)
    if (repo.groups or repo.students) and not yes:
        if not click.confirm("Vorhandene Daten durch Beispieldaten ersetzen?",
                             default=False):
            console.print("[yellow]Abgebrochen.[/yellow]")
            return

    gen = FakeDataGenerator(seed=seed)
    data = gen.generate()
    repo.replace(groups=data.groups, students=data.students)
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path),
              default=None, help="Pfad zur YAML-Konfiguration.")
@click.pass_context
def cli(ctx, config_path: Optional[Path]):
    """Nachhilfe-Buchhaltung: Gruppen, Schüler, Anwesenheit und Zahlungen.

    Starten Sie mit: python main.py config init
    """
    from config.manager import ConfigManager

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    try:
        config = ConfigManager(config_path).load_or_default()
    except ValueError as e:
        _fail(str(e))
    ctx.obj["config"] = config
    _setup_logging(config.logging.level)


def main():
    """Einstiegspunkt."""
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_dashboard)
cli.add_command(cmd_group)
cli.add_command(cmd_student)
cli.add_command(cmd_report)
cli.add_command(cmd_export)
cli.add_command(cmd_import)
cli.add_command(cmd_generate)


if __name__ == "__main__":
    main()
