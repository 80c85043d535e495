from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from pymongo.database import Database

from .db import IAM_USERS


@dataclass
class ExplainSummary:
    execution_time_ms: int
    docs_examined: int
    docs_returned: int
    index_name: Optional[str]
    stage: Optional[str]

    @property
    def used_index(self) -> bool:
        return self.index_name is not None


def group_member_filter(group_id: Any, tenant_id: str) -> Dict[str, Any]:
    return {"permission_groups": group_id, "tenant_id": tenant_id}


def iter_stages(stage: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    yield stage
    child = stage.get("inputStage")
    if child:
        yield from iter_stages(child)
    for child in stage.get("inputStages", []):
        yield from iter_stages(child)


def summarize_explain(result: Dict[str, Any]) -> ExplainSummary:
    """Pull timing, scan counts and the index used out of an executionStats explain."""
    stats = result.get("executionStats", {})
    root = stats.get("executionStages", {})
    index = next((s["indexName"] for s in iter_stages(root) if s.get("indexName")), None)
    return ExplainSummary(
        execution_time_ms=stats.get("executionTimeMillis", 0),
        docs_examined=stats.get("totalDocsExamined", 0),
        docs_returned=stats.get("nReturned", 0),
        index_name=index,
        stage=root.get("stage"),
    )


def explain_group_members(db: Database, group_id: Any, tenant_id: str) -> ExplainSummary:
    result = db.command(
        "explain",
        {"find": IAM_USERS, "filter": group_member_filter(group_id, tenant_id)},
        verbosity="executionStats",
    )
    return summarize_explain(result)


def sample_group_members(db: Database, group_id: Any, tenant_id: str, limit: int = 5) -> list[Dict[str, Any]]:
    cursor = db[IAM_USERS].find(group_member_filter(group_id, tenant_id)).limit(limit)
    return list(cursor)


def count_members(db: Database) -> int:
    return db[IAM_USERS].count_documents({})


@dataclass
class GroupFieldHealth:
    """Shape of ``permission_groups`` across cloud_iam_users."""

    with_groups: int = 0
    missing: int = 0
    empty: int = 0
    wrong_type: int = 0

    @property
    def without_groups(self) -> int:
        return self.missing + self.empty + self.wrong_type

    @property
    def total(self) -> int:
        return self.with_groups + self.without_groups


def permission_groups_health(db: Database) -> GroupFieldHealth:
    health = GroupFieldHealth()
    for doc in db[IAM_USERS].find({}, {"permission_groups": 1}):
        if "permission_groups" not in doc:
            health.missing += 1
            continue
        groups = doc["permission_groups"]
        if not isinstance(groups, list):
            health.wrong_type += 1
        elif groups:
            health.with_groups += 1
        else:
            health.empty += 1
    return health
