"""
Flask CLI commands for provisioning the hosted tables
"""
import json
import os

import click

from .extensions import get_backend

SEED_FILE = os.path.join(os.path.dirname(__file__), 'data', 'movies.json')


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create the DynamoDB tables if they are missing."""
        created = get_backend().create_tables()
        if created:
            click.echo(f"✅ Created tables: {', '.join(created)}")
        else:
            click.echo("Tables already exist")

    @app.cli.command('seed-movies')
    @click.option('--file', 'path', default=SEED_FILE, show_default=True,
                  type=click.Path(exists=True, dir_okay=False))
    def seed_movies(path):
        """Initialize the movies table from a JSON file if it is empty."""
        with open(path, 'r') as f:
            movies_data = json.load(f)

        count = get_backend().seed_movies(movies_data)
        if count:
            click.echo(f"✅ {count} movies added to database!")
        else:
            click.echo("Movies table is not empty, nothing to do")

    @app.cli.command('grant-admin')
    @click.argument('email')
    def grant_admin(email):
        """Give a registered user administrator privileges."""
        backend = get_backend()
        user = backend.get_user(email)
        if not user:
            raise click.ClickException(f"No user registered with {email}")
        if not backend.add_admin(user['user_id']):
            raise click.ClickException("Could not grant admin, see the logs")
        click.echo(f"✅ {user['email']} is now an administrator")
