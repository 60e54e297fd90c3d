# Infrastructure Adapters Package
from .json_catalog import JsonSubjectCatalog
from .memory_store import InMemoryProgressStore, InMemorySubjectCatalog
from .sqlite_store import SqliteProgressStore
from .wanikani import WaniKaniAdapter

__all__ = [
    "JsonSubjectCatalog",
    "InMemoryProgressStore",
    "InMemorySubjectCatalog",
    "SqliteProgressStore",
    "WaniKaniAdapter",
]
