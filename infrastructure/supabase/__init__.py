"""Supabase REST adapters for the auth and storage ports."""

from infrastructure.supabase.auth_validator import SupabaseAuthValidator
from infrastructure.supabase.object_store import SupabaseObjectStore

__all__ = ["SupabaseAuthValidator", "SupabaseObjectStore"]
