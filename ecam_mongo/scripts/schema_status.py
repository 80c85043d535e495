"""CLI utility to print the indexes and document counts of the bootstrap collections."""

import click

from ecam_mongo.app.config import config
from ecam_mongo.app.db import BOOTSTRAP_COLLECTIONS, IAM_USERS, collection_stats, list_indexes
from ecam_mongo.app.logging import setup_logging
from ecam_mongo.app.utils import format_key, open_database


@click.command()
def main() -> None:
    """Show indexes and document counts per collection."""
    setup_logging(config.DEBUG)
    db = open_database()
    names = (*BOOTSTRAP_COLLECTIONS, IAM_USERS)
    for coll_name, count in collection_stats(db, names).items():
        click.echo(f"{coll_name} ({count} documents)")
        for index in list_indexes(db[coll_name]):
            flags = [flag for flag in ("unique", "sparse") if index.get(flag)]
            if "expireAfterSeconds" in index:
                flags.append(f"ttl={index['expireAfterSeconds']}s")
            suffix = f" [{', '.join(flags)}]" if flags else ""
            click.echo(f"  {index['name']}: {format_key(index['key'])}{suffix}")


if __name__ == "__main__":
    main()
