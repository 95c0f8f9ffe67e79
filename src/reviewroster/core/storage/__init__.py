"""Persistence layer: database handle and store-level exceptions.

Repository implementations live in ``reviewroster.core.storage.repositories``
and the store contracts in ``reviewroster.core.storage.base``; they import the
models, so they are not re-exported here.
"""
from .database import Base, Database, get_db, init_db
from .exceptions import (
    DuplicateRecordError,
    PullRequestMergedError,
    RecordNotFoundError,
    ReviewerNotAssignedError,
    StoreError,
)

__all__ = [
    "Base",
    "Database",
    "get_db",
    "init_db",
    "StoreError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "ReviewerNotAssignedError",
    "PullRequestMergedError",
]
