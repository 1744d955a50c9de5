"""
Módulo de base de datos.

Provee acceso a Supabase y operaciones CRUD.
"""

from rentmatch.database.supabase_client import get_supabase_client, SupabaseClient
from rentmatch.database.repositories import (
    PreferenceRepository,
    PropertyRepository,
    MatchScoreRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "PreferenceRepository",
    "PropertyRepository",
    "MatchScoreRepository",
]
