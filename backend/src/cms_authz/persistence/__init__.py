"""Persistence handlers package."""

from cms_authz.persistence.handler import PersistenceHandler
from cms_authz.persistence.sql_handler import SqlPersistenceHandler

__all__ = [
    "PersistenceHandler",
    "SqlPersistenceHandler",
]
