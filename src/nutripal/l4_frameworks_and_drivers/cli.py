"""CLI entry point for nutripal."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from nutripal import __version__


def _session_options(f):
    """Options shared by every command that needs a logged-in session."""
    f = click.option('-e', '--email', default=None, help='Account email (prompted when omitted).')(f)
    f = click.option('--demo', is_flag=True, help='Use the built-in demo account instead of the backend.')(f)
    return click.option(
        '-c',
        '--config',
        'config_path',
        default=None,
        type=click.Path(exists=True, dir_okay=False),
        help='Path to YAML config file.',
    )(f)


def _load_configs(config_path: str | None):
    from pydantic import ValidationError  # noqa: PLC0415 -- deferred: not needed for --help

    from nutripal.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from nutripal.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        InfraConfig,
        build_app_config,
    )

    try:
        raw = YamlConfigLoader().load_raw(config_path)
        return build_app_config(raw), InfraConfig.model_validate(raw)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


def _open_session(config, infra, *, demo: bool, email: str | None):
    """Build the container and log in. Exits with status 1 on backend errors."""
    from nutripal.l1_entities.errors import BackendError  # noqa: PLC0415 -- deferred: not needed for --help
    from nutripal.l3_interface_adapters.gateways.in_memory_backend import (  # noqa: PLC0415 -- deferred: not needed for --help
        DEMO_EMAIL,
    )
    from nutripal.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: httpx stack not loaded on --help
        DependencyContainer,
    )

    container = DependencyContainer(config, infra, demo=demo)
    if demo:
        email, password = DEMO_EMAIL, ''
    else:
        email = email or click.prompt('Email')
        password = click.prompt('Password', hide_input=True)

    try:
        asyncio.run(container.controller.login(email, password))
    except BackendError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    return container


def _backend_call(coro_factory):
    """Run one backend coroutine, turning BackendError into a clean exit."""
    from nutripal.l1_entities.errors import BackendError  # noqa: PLC0415 -- deferred: not needed for --help

    try:
        return asyncio.run(coro_factory())
    except BackendError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """nutripal -- track meals and macros with an AI nutrition coach."""


@cli.command()
@_session_options
def chat(config_path, demo, email):
    """Open the chat coach TUI."""
    config, infra = _load_configs(config_path)
    container = _open_session(config, infra, demo=demo, email=email)

    _preflight_gemini(container.llm_client, config.coach.model)

    from nutripal.l4_frameworks_and_drivers.app import (  # noqa: PLC0415 -- deferred: Textual TUI not loaded for --help
        NutriPalApp,
    )

    app = NutriPalApp(
        controller=container.controller,
        log_dir=Path(config.logging.directory),
        log_level=config.logging.level,
    )
    app.run()


@cli.command()
@_session_options
def status(config_path, demo, email):
    """Print today's progress against your daily targets."""
    from nutripal.l4_frameworks_and_drivers.report import (  # noqa: PLC0415 -- deferred: not needed for --help
        render_dashboard,
    )

    config, infra = _load_configs(config_path)
    ctrl = _open_session(config, infra, demo=demo, email=email).controller
    click.echo(render_dashboard(ctrl.meals, ctrl.goals, ctrl.today))


@cli.command()
@_session_options
@click.option(
    '-d',
    '--date',
    'day',
    default=None,
    type=click.DateTime(formats=['%Y-%m-%d']),
    help='Day to show (YYYY-MM-DD, default today).',
)
def meals(config_path, demo, email, day):
    """Print one day's meals grouped by type."""
    from nutripal.l4_frameworks_and_drivers.report import (  # noqa: PLC0415 -- deferred: not needed for --help
        render_tracker,
    )

    config, infra = _load_configs(config_path)
    ctrl = _open_session(config, infra, demo=demo, email=email).controller
    if day is not None:
        ctrl.select_date(day.date())
    click.echo(render_tracker(ctrl.meals, ctrl.selected_date))


@cli.command('add-meal')
@_session_options
@click.option('--name', prompt=True)
@click.option('--type', 'meal_type', prompt=True, type=click.Choice(['breakfast', 'lunch', 'dinner', 'snack']))
@click.option('--calories', prompt=True, type=click.FloatRange(min=0))
@click.option('--protein', default=0.0, type=click.FloatRange(min=0), help='Grams.')
@click.option('--carbs', default=0.0, type=click.FloatRange(min=0), help='Grams.')
@click.option('--fat', default=0.0, type=click.FloatRange(min=0), help='Grams.')
@click.option(
    '-d',
    '--date',
    'day',
    default=None,
    type=click.DateTime(formats=['%Y-%m-%d']),
    help='Day to log the meal on (YYYY-MM-DD, default today).',
)
def add_meal(config_path, demo, email, name, meal_type, calories, protein, carbs, fat, day):
    """Log a meal by hand."""
    from nutripal.l1_entities.meal import MealDraft  # noqa: PLC0415 -- deferred: not needed for --help

    config, infra = _load_configs(config_path)
    ctrl = _open_session(config, infra, demo=demo, email=email).controller
    if day is not None:
        ctrl.select_date(day.date())
    draft = MealDraft(name=name, type=meal_type, calories=calories, protein=protein, carbs=carbs, fat=fat)
    stored = _backend_call(lambda: ctrl.add_meal(draft))
    click.echo(f'Logged [{stored.id}] {stored.name} ({stored.calories:g} kcal) on {ctrl.selected_date.isoformat()}.')


@cli.command('delete-meal')
@_session_options
@click.argument('meal_id')
def delete_meal(config_path, demo, email, meal_id):
    """Delete a meal by the id shown in `nutripal meals`."""
    config, infra = _load_configs(config_path)
    ctrl = _open_session(config, infra, demo=demo, email=email).controller
    key = int(meal_id) if meal_id.isdigit() else meal_id
    _backend_call(lambda: ctrl.delete_meal(key))
    click.echo(f'Deleted meal {meal_id}.')


@cli.command()
@_session_options
@click.option('--calories', default=None, type=click.FloatRange(min=0))
@click.option('--protein', default=None, type=click.FloatRange(min=0), help='Grams.')
@click.option('--carbs', default=None, type=click.FloatRange(min=0), help='Grams.')
@click.option('--fat', default=None, type=click.FloatRange(min=0), help='Grams.')
def goals(config_path, demo, email, calories, protein, carbs, fat):
    """Show the daily targets, or change the ones given as options."""
    config, infra = _load_configs(config_path)
    ctrl = _open_session(config, infra, demo=demo, email=email).controller
    changes = {
        k: v for k, v in {'calories': calories, 'protein': protein, 'carbs': carbs, 'fat': fat}.items() if v is not None
    }
    if changes:
        _backend_call(lambda: ctrl.update_goals(ctrl.goals.model_copy(update=changes)))
    g = ctrl.goals
    click.echo(f'Daily targets: {g.calories:g} kcal  P {g.protein:g}g  C {g.carbs:g}g  F {g.fat:g}g')


@cli.command()
@_session_options
@click.option('--name', default=None)
@click.option('--age', default=None, type=click.IntRange(min=0))
@click.option('--height', default=None, type=click.FloatRange(min=0), help='Centimetres.')
@click.option('--weight', default=None, type=click.FloatRange(min=0), help='Kilograms.')
@click.option(
    '--activity-level',
    default=None,
    type=click.Choice(['sedentary', 'light', 'moderate', 'active', 'very_active']),
)
@click.option('--goal', default=None, type=click.Choice(['lose', 'maintain', 'gain']))
def profile(config_path, demo, email, **fields):
    """Show your profile, or change the fields given as options."""
    config, infra = _load_configs(config_path)
    ctrl = _open_session(config, infra, demo=demo, email=email).controller
    changes = {k: v for k, v in fields.items() if v is not None}
    if changes:
        _backend_call(lambda: ctrl.update_profile(ctrl.user.model_copy(update=changes)))
    u = ctrl.user
    click.echo(
        f'{u.name} <{u.email}>: {u.age} y, {u.height:g} cm, {u.weight:g} kg, '
        f'activity {u.activity_level}, goal: {u.goal}'
    )


@cli.command()
@click.option('-c', '--config', 'config_path', default=None, type=click.Path(exists=True, dir_okay=False))
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--age', prompt=True, type=click.IntRange(min=0))
@click.option('--height', prompt='Height (cm)', type=click.FloatRange(min=0))
@click.option('--weight', prompt='Weight (kg)', type=click.FloatRange(min=0))
@click.option('--goal', prompt=True, type=click.Choice(['lose', 'maintain', 'gain']), default='maintain')
def register(config_path, name, email, password, age, height, weight, goal):
    """Create an account on the backend."""
    from nutripal.l1_entities.profile import Registration  # noqa: PLC0415 -- deferred: not needed for --help
    from nutripal.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: httpx stack not loaded on --help
        DependencyContainer,
    )

    config, infra = _load_configs(config_path)
    ctrl = DependencyContainer(config, infra).controller
    registration = Registration(
        name=name, email=email, password=password, age=age, height=height, weight=weight, goal=goal
    )
    _backend_call(lambda: ctrl.register(registration))
    click.echo(f'Welcome, {ctrl.user.name}! Run `nutripal chat` to meet your coach.')


@cli.command('forgot-password')
@click.option('-c', '--config', 'config_path', default=None, type=click.Path(exists=True, dir_okay=False))
@click.option('--email', prompt=True)
def forgot_password(config_path, email):
    """Ask the backend to send a password reset token."""
    from nutripal.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: httpx stack not loaded on --help
        DependencyContainer,
    )

    config, infra = _load_configs(config_path)
    ctrl = DependencyContainer(config, infra).controller
    click.echo(_backend_call(lambda: ctrl.forgot_password(email)))


@cli.command('reset-password')
@click.option('-c', '--config', 'config_path', default=None, type=click.Path(exists=True, dir_okay=False))
@click.option('--email', prompt=True)
@click.option('--token', prompt='Reset token')
@click.option('--new-password', prompt=True, hide_input=True, confirmation_prompt=True)
def reset_password(config_path, email, token, new_password):
    """Set a new password using the token from the reset mail."""
    from nutripal.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: httpx stack not loaded on --help
        DependencyContainer,
    )

    config, infra = _load_configs(config_path)
    ctrl = DependencyContainer(config, infra).controller
    click.echo(_backend_call(lambda: ctrl.reset_password(email, token, new_password)))


def _preflight_gemini(client, model: str) -> bool:
    ok, err = client.check_connectivity(model)
    if not ok:
        click.echo(f'Warning: Gemini not reachable ({err}). The coach will reply with a fallback message.', err=True)
    return ok
