"""CLI interface for the CompanionFit progression engine."""

from __future__ import annotations

import json
import random
import sys
from datetime import timedelta
from pathlib import Path

import click
from pydantic import TypeAdapter, ValidationError

from companionfit.badges import total_distance, total_weight_lifted
from companionfit.companions import STARTER_COMPANIONS
from companionfit.config import Config
from companionfit.health import HttpHealthSink
from companionfit.logging import setup_logging
from companionfit.models import Exercise, Workout, utcnow
from companionfit.service import CompanionFitService
from companionfit.store import JsonFileUserStore, PostgresUserStore

_EXERCISES_ADAPTER: TypeAdapter[list[Exercise]] = TypeAdapter(list[Exercise])


def build_service(config: Config) -> CompanionFitService:
    if config.store == "postgres":
        store = PostgresUserStore(config.database_url)
        store.ensure_schema()
    else:
        store = JsonFileUserStore(config.data_path)

    health = None
    if config.health_url:
        health = HttpHealthSink(config.health_url, config.health_api_key)

    rng = random.Random(config.seed) if config.seed is not None else random.Random()
    return CompanionFitService(store, health=health, rng=rng)


def _echo_errors(service: CompanionFitService) -> None:
    for report in service.last_errors:
        click.echo(f"Warning: {report.operation}: {report.message}", err=True)


def _load_user(service: CompanionFitService):
    user = service.load()
    _echo_errors(service)
    if user is None:
        click.echo("Error: No user found. Run `companionfit init` first.", err=True)
        sys.exit(1)
    return user


@click.group()
@click.pass_context
def main(ctx: click.Context):
    """CompanionFit — level up a training companion with your workouts."""
    config = Config.from_env()
    setup_logging(config.log_format)
    ctx.obj = build_service(config)


@main.command()
@click.argument("username")
@click.argument("trainer_name")
@click.option("--force", is_flag=True, help="Replace an existing user.")
@click.pass_obj
def init(service: CompanionFitService, username: str, trainer_name: str, force: bool):
    """Create a new user."""
    if service.load() is not None and not force:
        click.echo("Error: A user already exists. Use --force to replace it.", err=True)
        sys.exit(1)
    user = service.create_user(username, trainer_name)
    _echo_errors(service)
    click.echo(f"Welcome, trainer {user.trainer_name}! Pick a starter with `companionfit choose-starter`.")


@main.command()
def starters():
    """List available starter companions."""
    for key, template in STARTER_COMPANIONS.items():
        click.echo(f"{key}:")
        click.echo(f"  Name: {template.name}")
        click.echo(f"  Type: {template.type.value}")
        click.echo(f"  Evolves into {template.evolved_form} at level {template.evolution_level}")


@main.command("choose-starter")
@click.argument("key", type=click.Choice(list(STARTER_COMPANIONS.keys()), case_sensitive=False))
@click.pass_obj
def choose_starter(service: CompanionFitService, key: str):
    """Add a starter companion to your team."""
    _load_user(service)
    companion = service.select_starter_companion(key)
    _echo_errors(service)
    stats = companion.current_stats
    click.echo(f"{companion.name} joined your team!")
    click.echo(f"  HP {stats.hp}  ATK {stats.attack}  DEF {stats.defense}  SPD {stats.speed}")


@main.command("log-workout")
@click.option(
    "--file", "exercises_file",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="JSON list of exercises.",
)
@click.option("--minutes", type=float, default=0.0, show_default=True, help="Active workout duration.")
@click.option("--notes", type=str, help="Free-text workout notes.")
@click.pass_obj
def log_workout(service: CompanionFitService, exercises_file: Path, minutes: float, notes: str | None):
    """Record a finished workout and credit XP."""
    _load_user(service)
    try:
        with exercises_file.open() as f:
            exercises = _EXERCISES_ADAPTER.validate_python(json.load(f))
    except (json.JSONDecodeError, ValidationError) as exc:
        click.echo(f"Error: Invalid exercises file: {exc}", err=True)
        sys.exit(1)

    now = utcnow()
    workout = Workout(
        date=now - timedelta(minutes=minutes),
        exercises=tuple(exercises),
        total_duration=minutes * 60,
        notes=notes,
    )
    outcome = service.complete_workout(workout)
    _echo_errors(service)

    click.echo(f"Workout logged: {len(workout.exercises)} exercises, +{outcome.gained_xp} XP")
    if outcome.user_level_ups:
        click.echo(f"Trainer level up! Now level {outcome.user.level}")
    growth = outcome.companion_growth
    if growth is not None:
        companion = outcome.user.active_companion
        if growth.level_ups:
            click.echo(f"{companion.display_name} grew to level {companion.level}")
        if growth.evolved:
            click.echo(f"{growth.evolved_from} evolved into {companion.name}!")
    for badge in outcome.new_badges:
        click.echo(f"Badge earned: {badge.type.title} — {badge.type.description}")


@main.command()
@click.pass_obj
def status(service: CompanionFitService):
    """Show trainer and companion progress."""
    user = _load_user(service)
    click.echo(f"{user.trainer_name} (@{user.username})")
    click.echo(f"  Level: {user.level}")
    click.echo(f"  Total XP: {user.total_experience}")
    click.echo(f"  Workouts: {len(user.workouts)}")
    click.echo(f"  Lifted: {total_weight_lifted(user):.0f} kg")
    click.echo(f"  Distance: {total_distance(user):.1f} km")
    click.echo()
    for companion in user.companions:
        marker = "*" if companion.id == user.active_companion_id else " "
        click.echo(
            f"{marker} {companion.display_name} ({companion.type.value}) "
            f"Lv {companion.level} — {companion.experience}/{companion.experience_for_next_level()} XP"
        )


@main.command()
@click.pass_obj
def badges(service: CompanionFitService):
    """List earned badges."""
    user = _load_user(service)
    if not user.badges:
        click.echo("No badges yet.")
        return
    for badge in user.badges:
        click.echo(f"{badge.type.title}: {badge.type.description} ({badge.earned_at:%Y-%m-%d})")
