"""PostgREST (Supabase REST) infrastructure package."""

from .postgrest_remote_store import PostgrestRemoteStore

__all__ = ["PostgrestRemoteStore"]
