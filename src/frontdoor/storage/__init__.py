"""Record-store backends and the admin session.

All backends implement :class:`~frontdoor.storage.record_store.RecordStore`
and are interchangeable.

:class:`~frontdoor.storage.pocketbase.PocketBaseStore`
    HTTP client for a PocketBase instance.  Used in production.

:class:`~frontdoor.storage.memory.InMemoryRecordStore`
    In-process store for tests and local development.

:class:`~frontdoor.storage.session.AdminSessionProvider`
    Establishes the admin session once and shares it.
"""

from frontdoor.storage.memory import InMemoryRecordStore
from frontdoor.storage.pocketbase import PocketBaseStore
from frontdoor.storage.record_store import RecordStore
from frontdoor.storage.session import AdminSessionProvider, SessionState

__all__ = [
    "AdminSessionProvider",
    "InMemoryRecordStore",
    "PocketBaseStore",
    "RecordStore",
    "SessionState",
]
