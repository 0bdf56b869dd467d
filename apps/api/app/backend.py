"""Construction of the managed-service collaborators shared by every request."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from supabase import Client, ClientOptions, create_client

from app.adapters.auth import IdentityProvider, InMemoryIdentityProvider, SupabaseIdentityProvider
from app.adapters.storage import InMemoryObjectStorage, ObjectStorage, SupabaseObjectStorage
from app.core.config import Settings
from app.repositories.base import TableGateway
from app.repositories.memory import InMemoryTableGateway
from app.repositories.supabase_tables import SupabaseTableGateway

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Backend:
    """Tables, identity and object storage, built once per application."""

    tables: TableGateway
    identity: IdentityProvider
    storage: ObjectStorage
    name: str


def create_supabase_client(url: str, key: str) -> Client:
    # Server-side clients never persist or refresh a user session.
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(url, key, options=options)


def build_memory_backend(settings: Settings) -> Backend:
    tables = InMemoryTableGateway()
    return Backend(
        tables=tables,
        identity=InMemoryIdentityProvider(tables),
        storage=InMemoryObjectStorage(settings.supabase_base_url, settings.supabase_storage_bucket),
        name="memory",
    )


def build_supabase_backend(settings: Settings) -> Backend:
    url = settings.supabase_base_url
    public_client = create_supabase_client(url, settings.supabase_anon_key)
    admin_client = None
    if settings.supabase_service_role_key:
        admin_client = create_supabase_client(url, settings.supabase_service_role_key)
    else:
        logger.warning("backend.service_role_missing admin_operations=disabled")

    data_client = admin_client or public_client
    return Backend(
        tables=SupabaseTableGateway(data_client),
        identity=SupabaseIdentityProvider(
            public_client,
            session_client_factory=partial(create_supabase_client, url, settings.supabase_anon_key),
            admin_client=admin_client,
        ),
        storage=SupabaseObjectStorage(data_client, settings.supabase_storage_bucket),
        name="supabase",
    )


def build_backend(settings: Settings) -> Backend:
    if settings.service_backend == "memory":
        backend = build_memory_backend(settings)
    else:
        backend = build_supabase_backend(settings)
    logger.info("backend.ready name=%s bucket=%s", backend.name, settings.supabase_storage_bucket)
    return backend


__all__ = ["Backend", "build_backend", "build_memory_backend", "build_supabase_backend", "create_supabase_client"]
