"""
Command line helpers for running the family tree service locally.

Be sure that you are using the same secret when generating a token as when you
run the app. Set ``JWT_SECRET=somesecret`` in your environment to ensure that
the same secret is always used.

.. code-block:: bash

   $ DATABASE_URL=sqlite:///./family_tree.db family-tree create-tables
   $ JWT_SECRET=foosecret family-tree generate-token --user-id 1234 --email joe@bloggs.com
   eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...

Use the token in your requests with the header ``Authorization: Bearer [token]``.
"""
from datetime import timedelta

import click

from . import config
from .db import Database
from .exceptions import FamilyTreeError
from .sessions import encode


@click.group()
def cli():
    """Family tree service tools."""


@cli.command('create-tables')
@click.option('--database-url', default=lambda: config.DATABASE_URL,
              help='SQLAlchemy URL, defaults to DATABASE_URL')
def create_tables(database_url):
    """Create any missing tables."""
    database = Database(database_url)
    try:
        database.create_tables()
    except FamilyTreeError as ex:
        raise click.ClickException(ex.message) from ex
    click.echo('Tables created')


@cli.command('generate-token')
@click.option('--user-id', prompt='User ID')
@click.option('--email', prompt='Email address')
@click.option('--days', default=config.SESSION_DURATION_DAYS, show_default=True,
              help='Days the token is valid')
def generate_token(user_id, email, days):
    """Print a session token signed with JWT_SECRET."""
    try:
        token = encode(user_id, email, config.JWT_SECRET, duration=timedelta(days=days))
    except FamilyTreeError as ex:
        raise click.ClickException(ex.message) from ex
    click.echo(token)


if __name__ == '__main__':
    cli()
