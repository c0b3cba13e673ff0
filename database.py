"""
MongoDB access for the SiteGuard API.

Two collections are used:
- users: registered accounts (unique lowercased email)
- workspaces: construction projects with their resources, architecture plan
  and safety reports embedded in the same document
"""

import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import Settings, get_settings

logger = logging.getLogger(__name__)

USERS = "users"
WORKSPACES = "workspaces"

_client: Optional[MongoClient] = None


def get_client(settings: Settings) -> MongoClient:
    global _client
    if _client is None:
        logger.info("Connecting to MongoDB at %s", settings.mongo_url)
        _client = MongoClient(settings.mongo_url, tz_aware=True)
    return _client


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_db(settings: Settings = Depends(get_settings)) -> Database:
    return get_client(settings)[settings.database_name]


def ensure_indexes(db: Database) -> None:
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[WORKSPACES].create_index([("ownerId", ASCENDING)])


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for ``value`` or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def sanitize(doc: Optional[Dict]) -> Optional[Dict]:
    if not doc:
        return doc
    d = {**doc}
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    if isinstance(d.get("ownerId"), ObjectId):
        d["ownerId"] = str(d["ownerId"])
    d.pop("password", None)
    return d
