"""CLI utility to drop the secondary indexes on the bootstrap collections and cloud_iam_users."""

import click

from ecam_mongo.app.config import config
from ecam_mongo.app.db import BOOTSTRAP_COLLECTIONS, IAM_USERS, drop_indexes
from ecam_mongo.app.logging import setup_logging
from ecam_mongo.app.utils import open_database


@click.command()
@click.option("--yes", is_flag=True, help="Drop without asking for confirmation.")
def main(yes: bool) -> None:
    """Drop every index except _id_ so ensure-schema can rebuild them."""
    setup_logging(config.DEBUG)
    names = (*BOOTSTRAP_COLLECTIONS, IAM_USERS)
    if not yes:
        click.confirm(f"Drop all secondary indexes on {', '.join(names)}?", abort=True)

    db = open_database()
    for coll_name, dropped in drop_indexes(db, names).items():
        click.echo(f"{coll_name}: dropped {len(dropped)} indexes")
        for name in dropped:
            click.echo(f"  - {name}")
    click.echo("Index cleanup complete; run ensure-schema to recreate them.")


if __name__ == "__main__":
    main()
