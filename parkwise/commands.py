import click
from flask import current_app
from flask.cli import with_appcontext

from parkwise.extensions import db
from parkwise.seed import seed_demo_data
from parkwise.services import get_services


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create database tables."""
    db.create_all()
    click.echo(f"Database tables created at {current_app.config['SQLALCHEMY_DATABASE_URI']}")


@click.command('seed-db')
@click.option('--seed', type=int, default=None, help='Random seed for spot types/availability.')
@with_appcontext
def seed_db_command(seed):
    """Load the demo user, lots, spots and reservations."""
    db.create_all()
    if seed_demo_data(get_services(), seed=seed):
        click.echo('Demo data created. Login with -> demo_user | password123')
    else:
        click.echo('Database already seeded. Skipping...')


@click.command('sweep-reservations')
@with_appcontext
def sweep_reservations_command():
    """Activate started reservations and complete finished ones."""
    result = get_services().reservations.sweep()
    click.echo(f"{result['activated']} activated, {result['completed']} completed")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_db_command)
    app.cli.add_command(sweep_reservations_command)
