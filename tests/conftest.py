"""
Pytest configuration and fixtures.

Los tests nunca hablan con Supabase: el motor recibe repositorios en
memoria y los repositorios reciben un cliente MagicMock.
"""

from typing import Optional

import pytest

from rentmatch.config import Settings, get_settings
from rentmatch.models import MatchScore, Property, PropertyStatus, UserPreferences


@pytest.fixture(autouse=True)
def fake_env(monkeypatch):
    """Credenciales falsas y settings frescos en cada test."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-anon-key")
    monkeypatch.delenv("SUPABASE_SERVICE_KEY", raising=False)
    monkeypatch.delenv("RESCORE_CONCURRENCY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class InMemoryPreferenceRepository:
    def __init__(self, *preferences: UserPreferences):
        self.rows = {p.user_id: p for p in preferences}
        self.upserts = 0

    def get_by_user_id(self, user_id: str) -> Optional[UserPreferences]:
        return self.rows.get(user_id)

    def upsert(self, preferences: UserPreferences) -> dict:
        self.upserts += 1
        self.rows[preferences.user_id] = preferences
        return preferences.to_db_dict()

    def get_user_ids(self) -> list[str]:
        return list(self.rows)


class InMemoryPropertyRepository:
    def __init__(self, *properties: Property):
        self.rows = {p.id: p for p in properties}

    def get_by_id(self, property_id: str) -> Optional[Property]:
        return self.rows.get(property_id)

    def get_available(self) -> list[Property]:
        return [p for p in self.rows.values() if p.status == PropertyStatus.AVAILABLE]


class InMemoryMatchScoreRepository:
    """Emula el UNIQUE(user_id, property_id) de match_scores."""

    def __init__(self):
        self.rows: dict[tuple[str, str], MatchScore] = {}
        self.writes = 0

    def upsert(self, match_score: MatchScore) -> dict:
        self.writes += 1
        self.rows[(match_score.user_id, match_score.property_id)] = match_score
        return match_score.to_db_dict()

    def get_for_user(self, user_id: str, limit: int = 50) -> list[MatchScore]:
        scores = [s for (uid, _), s in self.rows.items() if uid == user_id]
        scores.sort(key=lambda s: s.score, reverse=True)
        return scores[:limit]

    def get_score(self, user_id: str, property_id: str) -> Optional[MatchScore]:
        return self.rows.get((user_id, property_id))

    def count_for_user(self, user_id: str) -> int:
        return sum(1 for uid, _ in self.rows if uid == user_id)


@pytest.fixture
def settings():
    return Settings(supabase_url="https://test.supabase.co", supabase_key="test-anon-key")


@pytest.fixture
def basic_preferences():
    """Preferencias sin geo con match perfecto contra basic_property."""
    return UserPreferences(
        user_id="user-1",
        budget_min=1000,
        budget_max=2000,
        preferred_bedrooms=[2],
        preferred_amenities=["gym"],
        pet_friendly=False,
        furnished_preferred=False,
        parking_required=False,
    )


@pytest.fixture
def basic_property():
    return Property(
        id="prop-1",
        price=1500,
        bedrooms=2,
        amenities=["gym"],
        pet_friendly=False,
        furnished=False,
        parking_included=False,
    )
