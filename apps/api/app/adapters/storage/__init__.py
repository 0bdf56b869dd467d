"""Object storage adapters."""

from .base import ObjectConflictError, ObjectStorage, ObjectStorageError, StoredObject
from .memory_storage import InMemoryObjectStorage
from .supabase_storage import SupabaseObjectStorage

__all__ = [
    "InMemoryObjectStorage",
    "ObjectConflictError",
    "ObjectStorage",
    "ObjectStorageError",
    "StoredObject",
    "SupabaseObjectStorage",
]
