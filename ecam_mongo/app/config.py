from __future__ import annotations

import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def database_from_uri(uri: str) -> str:
    """Return the database segment of a MongoDB URI, without its query string."""
    tail = uri.split("://", 1)[-1]
    if "/" not in tail:
        return ""
    return tail.split("/", 1)[1].split("?", 1)[0]


class Config:
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/e_cam_service")
    MONGO_DATABASE = os.getenv("MONGO_DATABASE") or database_from_uri(MONGO_URI) or "e_cam_service"
    MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "10000"))

    APP_DB_USER = os.getenv("APP_DB_USER", "e_cam_user")
    APP_DB_PASSWORD = os.getenv("APP_DB_PASSWORD", "e_cam_password")
    APP_DB_ROLE = os.getenv("APP_DB_ROLE", "readWrite")

    DEBUG = _env_flag("DEBUG")


config = Config()
