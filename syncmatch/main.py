from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import Settings
from .data_models import HISTORY_WINDOW, LOCATION_PREFERENCE_TOKENS, parse_location_preference
from .history import recent_window
from .ingest import CsvRosterSource, build_participants
from .job import run_round
from .matcher import match_participants
from .notifier import ConsoleNotifier
from .store import CsvParticipantStore, FactIndexError, ParticipantNotFound


app = typer.Typer(help="Random sync matching CLI")
bio_app = typer.Typer(help="Manage the facts shared in intro messages")
app.add_typer(bio_app, name="bio")

NO_PROFILE = "No profile stored for {user}. Try `bio add` to add some facts."


def _setup_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(message)s",
		handlers=[RichHandler(show_path=False)],
		force=True,
	)


def _fail(message: str) -> None:
	print(f"[red]{message}[/red]")
	raise typer.Exit(code=1)


def _settings(ctx: typer.Context) -> Settings:
	return ctx.obj


@app.callback()
def main(
	ctx: typer.Context,
	roster: Optional[Path] = typer.Option(None, help="Roster CSV (overrides SYNCMATCH_ROSTER_CSV)"),
	store: Optional[Path] = typer.Option(None, help="Participant store CSV (overrides SYNCMATCH_STORE_CSV)"),
	seed: Optional[int] = typer.Option(None, help="Seed for match order and fact selection"),
	verbose: bool = typer.Option(False, "--verbose/--quiet", help="Log every step"),
):
	_setup_logging(verbose)
	try:
		settings = Settings.from_env()
	except ValueError as exc:
		_fail(str(exc))
	ctx.obj = settings.with_overrides(roster_csv=roster, store_csv=store, seed=seed)


@app.command()
def match(ctx: typer.Context):
	"""Preview this round's groups without messaging anyone or writing history."""
	settings = _settings(ctx)
	participant_store = CsvParticipantStore(settings.store_csv)
	try:
		members = CsvRosterSource(settings.roster_csv).list_members()
		members = [m for m in members if m != settings.bot_user_id]
		participants = build_participants(members, participant_store.get_many(members))
		run = match_participants(participants, random.Random(settings.seed))
	except (FileNotFoundError, KeyError, ValueError) as exc:
		_fail(f"Error: {exc}")

	by_id = {p.id: p for p in participants}
	table = Table("group", "members", "preferences", "recent partners")
	for i, group in enumerate(run.groups, start=1):
		prefs = ", ".join(by_id[m].location_preference.value for m in group.members)
		recent = "; ".join(
			f"{m}: {', '.join(by_id[m].recent_partners) or '-'}" for m in group.members
		)
		table.add_row(f"{i:02d}", " ↔ ".join(group.members), prefs, recent)
	print(table)
	print(f"[bold]Generated {len(run.groups)} groups[/bold] from {len(participants)} participants")


@app.command()
def run(
	ctx: typer.Context,
	dry_run: bool = typer.Option(False, "--dry-run/--no-dry-run", help="Compute groups only"),
):
	"""Match the roster, post intros and the announcement, then record history."""
	settings = _settings(ctx)
	try:
		result = run_round(
			CsvRosterSource(settings.roster_csv),
			CsvParticipantStore(settings.store_csv),
			ConsoleNotifier(),
			settings,
			dry_run=dry_run,
		)
	except (FileNotFoundError, KeyError, ValueError) as exc:
		_fail(f"Error: {exc}")
	verb = "Previewed" if dry_run else "Started"
	print(f"[green]{verb} {len(result.groups)} random syncs[/green]")


@app.command()
def history(ctx: typer.Context, user_id: str = typer.Argument(..., help="Participant id")):
	"""Show the partners that currently block a repeat match."""
	record = CsvParticipantStore(_settings(ctx).store_csv).get(user_id)
	if record is None:
		_fail(NO_PROFILE.format(user=user_id))
	recent = recent_window(record.last_three_matched, HISTORY_WINDOW)
	if not recent:
		print(f"{user_id} has not been matched yet")
		return
	print(f"Recent partners of {user_id}: {', '.join(recent)}")


@app.command()
def prefer(
	ctx: typer.Context,
	user_id: str = typer.Argument(..., help="Participant id"),
	preference: str = typer.Argument(..., help="in_person, virtual or no_pref"),
):
	"""Set a participant's location preference."""
	token = preference.strip().lower()
	if token not in LOCATION_PREFERENCE_TOKENS.values():
		_fail(f"Unknown location preference {escape(preference)!r}; use in_person, virtual or no_pref")
	pref = parse_location_preference(token)
	CsvParticipantStore(_settings(ctx).store_csv).set_location_preference(user_id, pref)
	print(f"[green]Location preference for {user_id} set to[/green] {pref.value}")


@bio_app.command("add")
def bio_add(
	ctx: typer.Context,
	user_id: str = typer.Argument(..., help="Participant id"),
	fact: str = typer.Argument(..., help="Fact to add"),
):
	"""Add a fact to a participant's bio."""
	if not fact.strip():
		_fail("You need to specify a fact about yourself to add!")
	CsvParticipantStore(_settings(ctx).store_csv).add_fact(user_id, fact.strip())
	print(f"[green]Successfully added to your bio:[/green] {escape(fact.strip())}")


@bio_app.command("remove")
def bio_remove(
	ctx: typer.Context,
	user_id: str = typer.Argument(..., help="Participant id"),
	index: int = typer.Argument(..., help="Number of the fact, as listed by `bio show`"),
):
	"""Remove a fact from a participant's bio."""
	try:
		removed = CsvParticipantStore(_settings(ctx).store_csv).remove_fact(user_id, index)
	except ParticipantNotFound:
		_fail(NO_PROFILE.format(user=user_id))
	except FactIndexError:
		_fail(f"Unable to delete fact {index} - are you sure it exists? (try `bio show`)")
	print(f"[green]Successfully removed from bio:[/green] {escape(removed)}")


@bio_app.command("show")
def bio_show(ctx: typer.Context, user_id: str = typer.Argument(..., help="Participant id")):
	"""List a participant's facts with their numbers."""
	settings = _settings(ctx)
	try:
		facts = CsvParticipantStore(settings.store_csv).get_facts(user_id)
	except ParticipantNotFound:
		facts = []
	if not facts:
		_fail(NO_PROFILE.format(user=user_id))
	print("Here are the current facts on your bio:")
	for i, fact in enumerate(facts):
		print(f"{i}: {escape(fact)}")
	if len(facts) > settings.max_facts:
		print(
			f"Note: only {settings.max_facts} facts, chosen at random, "
			"will be displayed to your chat partner."
		)


if __name__ == "__main__":
	app()
