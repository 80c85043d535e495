from __future__ import annotations

import structlog
from pymongo.database import Database

logger = structlog.get_logger(__name__)


def ensure_app_user(db: Database, username: str, password: str, role: str = "readWrite") -> bool:
    """Create a login scoped to ``db`` unless it already exists.

    Returns True when the user was created by this call.
    """
    info = db.command("usersInfo", username)
    if info.get("users"):
        logger.info("account_exists", user=username, database=db.name)
        return False

    db.command("createUser", username, pwd=password, roles=[{"role": role, "db": db.name}])
    logger.info("account_created", user=username, database=db.name, role=role)
    return True
