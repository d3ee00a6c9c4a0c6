"""
Database module - scoped MongoDB connections and index provisioning.
"""
from registry_auth.database.connections import (
    create_mongo_client,
    users_collection,
    ensure_indexes,
)

__all__ = [
    "create_mongo_client",
    "users_collection",
    "ensure_indexes",
]
