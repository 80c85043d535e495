from __future__ import annotations

import json
from typing import Any, Iterable

import click
from pymongo.database import Database
from pymongo.errors import ConnectionFailure

from .db import connect

RULE = "=" * 40
SUBRULE = "-" * 42


def open_database() -> Database:
    try:
        return connect()
    except ConnectionFailure as exc:
        raise click.ClickException(f"Could not connect to MongoDB: {exc}") from exc


def format_key(key: Iterable[tuple[str, Any]]) -> str:
    return json.dumps(dict(key))


def format_groups(groups: Iterable[Any]) -> str:
    return ", ".join(str(group) for group in groups)


def banner(title: str) -> None:
    click.echo(RULE)
    click.echo(title)
    click.echo(RULE)


def section(title: str) -> None:
    click.echo(title)
    click.echo(SUBRULE)
