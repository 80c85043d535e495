from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import structlog
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import OperationFailure

from .config import config

logger = structlog.get_logger(__name__)

INDEX_OPTIONS_CONFLICT = 85

BOOTSTRAP_COLLECTIONS = ("endpoints", "users", "sessions")
IAM_USERS = "cloud_iam_users"
GROUP_TENANT_INDEX = "idx_permission_groups_tenant"

IndexTable = Dict[str, list[tuple[Any, Dict[str, Any]]]]

INDEXES: IndexTable = {
    "endpoints": [
        (("name", 1), {"unique": True}),
        (("url", 1), {}),
        (("method", 1), {}),
        (("created_at", 1), {}),
        (("updated_at", 1), {}),
    ],
    "users": [
        (("username", 1), {"unique": True}),
        (("email", 1), {"unique": True}),
        (("created_at", 1), {}),
    ],
    "sessions": [
        (("session_id", 1), {"unique": True}),
        (("user_id", 1), {}),
        (("expires_at", 1), {"expireAfterSeconds": 0}),
    ],
    IAM_USERS: [
        (
            (("permission_groups", 1), ("tenant_id", 1)),
            {"name": GROUP_TENANT_INDEX, "background": True},
        ),
    ],
}

_client: MongoClient | None = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        _client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS)
    return _client


def get_db() -> Database:
    return get_client()[config.MONGO_DATABASE]


def connect() -> Database:
    """Return the configured database once the server has answered a ping."""
    db = get_db()
    db.client.admin.command("ping")
    logger.info("mongo_connected", database=db.name)
    return db


@dataclass
class IndexOutcome:
    collection: str
    name: str
    keys: list[tuple[str, Any]]
    options: Dict[str, Any]
    status: str  # created, unchanged, conflict or failed
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


def key_spec(keys: Any) -> list[tuple[str, Any]]:
    if keys and isinstance(keys[0], tuple):
        return list(keys)
    return [keys]


def index_name(key_list: Iterable[tuple[str, Any]]) -> str:
    """Default index name as the server generates it, e.g. ``username_1``."""
    return "_".join(f"{field}_{direction}" for field, direction in key_list)


def is_options_conflict(exc: OperationFailure) -> bool:
    details = exc.details or {}
    return exc.code == INDEX_OPTIONS_CONFLICT or details.get("codeName") == "IndexOptionsConflict"


def ensure_collections(db: Database, names: Iterable[str] = BOOTSTRAP_COLLECTIONS) -> list[str]:
    """Create the named collections that do not exist yet and return them."""
    existing = set(db.list_collection_names())
    created: list[str] = []
    for name in names:
        if name in existing:
            continue
        db.create_collection(name)
        created.append(name)
        logger.info("collection_created", collection=name)
    return created


def ensure_index(coll: Collection, keys: Any, **options: Any) -> IndexOutcome:
    """Create one index, tolerating an existing index with different options.

    Any other server error is logged and reported as a ``failed`` outcome so
    the caller can move on to the next index.
    """
    key_list = key_spec(keys)
    name = options.get("name") or index_name(key_list)
    existing = coll.index_information()
    try:
        coll.create_index(key_list, **options)
    except OperationFailure as exc:
        if is_options_conflict(exc):
            logger.info("index_conflict_skipped", collection=coll.name, index=name)
            return IndexOutcome(coll.name, name, key_list, options, "conflict")
        logger.error("index_creation_failed", collection=coll.name, index=name, error=str(exc))
        return IndexOutcome(coll.name, name, key_list, options, "failed", error=str(exc))

    status = "unchanged" if name in existing else "created"
    logger.info("index_ensured", collection=coll.name, index=name, status=status)
    return IndexOutcome(coll.name, name, key_list, options, status)


def ensure_indexes(db: Database, indexes: IndexTable = INDEXES) -> list[IndexOutcome]:
    """Create indexes for the collections and return one outcome per index."""
    outcomes: list[IndexOutcome] = []
    for coll_name, index_list in indexes.items():
        coll = db[coll_name]
        for keys, options in index_list:
            outcomes.append(ensure_index(coll, keys, **options))
    return outcomes


def list_indexes(coll: Collection) -> list[Dict[str, Any]]:
    listing: list[Dict[str, Any]] = []
    for name, info in coll.index_information().items():
        entry = {key: value for key, value in info.items() if key not in {"key", "v", "ns"}}
        entry["name"] = name
        entry["key"] = list(info["key"])
        listing.append(entry)
    return listing


def drop_indexes(db: Database, names: Iterable[str]) -> Dict[str, list[str]]:
    """Drop every index except ``_id_`` on the given collections."""
    dropped: Dict[str, list[str]] = {}
    for coll_name in names:
        coll = db[coll_name]
        dropped[coll_name] = []
        for name in coll.index_information():
            if name == "_id_":
                continue
            try:
                coll.drop_index(name)
            except OperationFailure as exc:
                logger.error("index_drop_failed", collection=coll_name, index=name, error=str(exc))
                continue
            dropped[coll_name].append(name)
            logger.info("index_dropped", collection=coll_name, index=name)
    return dropped


def collection_stats(db: Database, names: Iterable[str]) -> Dict[str, int]:
    return {name: db[name].count_documents({}) for name in names}
