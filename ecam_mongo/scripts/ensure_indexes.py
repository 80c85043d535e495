"""CLI utility to create the e-cam collections, indexes and service account."""

import click

from ecam_mongo.app.accounts import ensure_app_user
from ecam_mongo.app.config import config
from ecam_mongo.app.db import BOOTSTRAP_COLLECTIONS, ensure_collections, ensure_indexes
from ecam_mongo.app.logging import setup_logging
from ecam_mongo.app.utils import format_key, open_database


@click.command()
@click.option("--skip-user", is_flag=True, help="Do not create the service account.")
def main(skip_user: bool) -> None:
    """Ensure collections, indexes and the service account exist."""
    setup_logging(config.DEBUG)
    db = open_database()

    for name in ensure_collections(db):
        click.echo(f"Created collection {name}")

    outcomes = ensure_indexes(db)
    for outcome in outcomes:
        click.echo(
            f"{outcome.status.capitalize()} index on {outcome.collection}: "
            f"{format_key(outcome.keys)} options={outcome.options}"
        )

    if not skip_user:
        if ensure_app_user(db, config.APP_DB_USER, config.APP_DB_PASSWORD, config.APP_DB_ROLE):
            click.echo(f"Created user {config.APP_DB_USER}")
        else:
            click.echo(f"User {config.APP_DB_USER} already exists")

    click.echo("MongoDB initialisation complete")
    click.echo(f"Database: {db.name}")
    click.echo(f"User: {config.APP_DB_USER}")
    click.echo(f"Collections: {', '.join(BOOTSTRAP_COLLECTIONS)}")
    failed = [outcome for outcome in outcomes if not outcome.ok]
    if failed:
        click.echo(f"Indexes created, {len(failed)} failed: {', '.join(o.name for o in failed)}")
    else:
        click.echo("Indexes created")


if __name__ == "__main__":
    main()
