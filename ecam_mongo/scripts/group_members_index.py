"""Create the group-membership index on cloud_iam_users and report how it is used.

The report walks through five steps: existing indexes, index creation,
verification, a permission_groups health count with an executionStats
explain of the membership query, and a short sample of matching members.
"""

from __future__ import annotations

import click
from marshmallow import ValidationError

from ecam_mongo.app.config import config
from ecam_mongo.app.db import IAM_USERS, INDEXES, ensure_index, list_indexes
from ecam_mongo.app.diagnostics import (
    count_members,
    explain_group_members,
    permission_groups_health,
    sample_group_members,
)
from ecam_mongo.app.logging import setup_logging
from ecam_mongo.app.schemas import MemberQuerySchema, MemberSummarySchema
from ecam_mongo.app.utils import banner, format_groups, format_key, open_database, section

OUTCOME_MESSAGES = {
    "created": "Index created: {name}",
    "unchanged": "Index already present: {name}",
    "conflict": "Index already exists, skipping creation",
    "failed": "Index creation failed: {error}",
}


@click.command()
@click.option("--group-id", default=1, show_default=True, help="Permission group to query.")
@click.option("--tenant-id", default="tenant-001", show_default=True, help="Tenant to query.")
@click.option("--limit", default=5, show_default=True, help="Maximum number of members to print.")
def main(group_id: int, tenant_id: str, limit: int) -> None:
    """Ensure the (permission_groups, tenant_id) index and explain the member query."""
    try:
        params = MemberQuerySchema().load({"group_id": group_id, "tenant_id": tenant_id, "limit": limit})
    except ValidationError as exc:
        details = "; ".join(f"{key}: {', '.join(map(str, value))}" for key, value in exc.messages.items())
        raise click.UsageError(details) from exc

    setup_logging(config.DEBUG)
    db = open_database()
    users = db[IAM_USERS]

    banner("Group member query index")
    click.echo()

    section("1. Existing indexes")
    group_indexes = [
        index for index in list_indexes(users) if any(field == "permission_groups" for field, _ in index["key"])
    ]
    for index in group_indexes:
        click.echo(f"Found permission_groups index: {index['name']}")
        click.echo(f"   key: {format_key(index['key'])}")
    if not group_indexes:
        click.echo("No permission_groups index found")
    click.echo()

    section("2. Create compound index")
    keys, options = INDEXES[IAM_USERS][0]
    outcome = ensure_index(users, keys, **options)
    click.echo(OUTCOME_MESSAGES[outcome.status].format(name=outcome.name, error=outcome.error))
    click.echo()

    section("3. Verify indexes")
    for index in list_indexes(users):
        click.echo(f"Index name: {index['name']}")
        click.echo(f"  key: {format_key(index['key'])}")
        if "background" in index:
            click.echo(f"  background: {index['background']}")
        click.echo()

    section("4. Query performance")
    click.echo(f"Total users: {count_members(db)}")
    health = permission_groups_health(db)
    click.echo(
        f"permission_groups: {health.with_groups} with groups, {health.missing} missing, "
        f"{health.empty} empty, {health.wrong_type} not an array"
    )
    click.echo(f"\nQuery: group id={params['group_id']}, tenant_id={params['tenant_id']}")
    summary = explain_group_members(db, params["group_id"], params["tenant_id"])
    click.echo(f"Execution time: {summary.execution_time_ms} ms")
    click.echo(f"Documents examined: {summary.docs_examined}")
    click.echo(f"Documents returned: {summary.docs_returned}")
    if summary.used_index:
        click.echo(f"Using index: {summary.index_name}")
    else:
        click.echo(f"No index used (full collection scan, stage {summary.stage})")
    click.echo()

    section("5. Sample members")
    members = MemberSummarySchema(many=True).dump(
        sample_group_members(db, params["group_id"], params["tenant_id"], params["limit"])
    )
    click.echo(f"Found {len(members)} members (showing at most {params['limit']}):")
    for position, member in enumerate(members, start=1):
        click.echo(f"  {position}. {member.get('username')} (ID: {member.get('id')})")
        click.echo(f"     groups: [{format_groups(member['permission_groups'])}]")
    click.echo()

    banner("Index setup complete")


if __name__ == "__main__":
    main()
