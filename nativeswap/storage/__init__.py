"""Persistence: Supabase tables and the Redis cache in front of them."""

from .kv_store import KVStore
from .supabase_store import Announcement, SupabaseStore

__all__ = ["KVStore", "SupabaseStore", "Announcement"]
