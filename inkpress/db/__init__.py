"""In-process stand-in for the Supabase client plus the factory that picks a backend."""

from inkpress.db.client import MockSupabaseClient
from inkpress.db.responses import AuthResponse, ErrorCode, ErrorDetail, QueryResponse
from inkpress.db.store import FixtureStore

__all__ = [
    "AuthResponse",
    "ErrorCode",
    "ErrorDetail",
    "FixtureStore",
    "MockSupabaseClient",
    "QueryResponse",
]
