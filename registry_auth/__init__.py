"""
registry_auth - MongoDB authentication and group-based package authorization
for a package registry server.
"""
from registry_auth.plugin import MongoAuthPlugin

__all__ = ["MongoAuthPlugin"]
