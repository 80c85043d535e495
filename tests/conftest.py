"""
Shared fixtures for the ecam_mongo tests.

MongoDB is replaced by mongomock. Commands that mongomock does not implement
(usersInfo, createUser, explain) are exercised against MagicMock databases in
the individual test modules.
"""

from unittest.mock import MagicMock

import mongomock
import pytest


@pytest.fixture
def mock_mongo_client():
    """In-memory MongoDB client."""
    client = mongomock.MongoClient()
    yield client
    client.close()


@pytest.fixture
def mock_db(mock_mongo_client):
    """Empty e_cam_service database."""
    return mock_mongo_client["e_cam_service"]


@pytest.fixture
def iam_users(mock_db):
    """cloud_iam_users with members spread over two tenants and three groups."""
    coll = mock_db["cloud_iam_users"]
    coll.insert_many(
        [
            {"id": 1, "username": "alice", "permission_groups": [1, 2], "tenant_id": "tenant-001"},
            {"id": 2, "username": "bob", "permission_groups": [1], "tenant_id": "tenant-001"},
            {"id": 3, "username": "carol", "permission_groups": [2], "tenant_id": "tenant-001"},
            {"id": 4, "username": "dave", "permission_groups": [1], "tenant_id": "tenant-002"},
        ]
        + [
            {"id": 100 + n, "username": f"bulk{n}", "permission_groups": [1, 3], "tenant_id": "tenant-001"}
            for n in range(6)
        ]
    )
    return coll


@pytest.fixture
def mock_collection():
    """MagicMock collection with no existing indexes."""
    coll = MagicMock()
    coll.name = "cloud_iam_users"
    coll.index_information.return_value = {"_id_": {"key": [("_id", 1)]}}
    return coll


@pytest.fixture
def schema_db(mock_db):
    """Database with the bootstrap collections and cloud_iam_users present but unindexed."""
    for name in ("endpoints", "users", "sessions", "cloud_iam_users"):
        mock_db.create_collection(name)
    return mock_db
