"""
Repositorios para operaciones CRUD en Supabase.

Cada repositorio maneja una tabla/entidad específica:
- PreferenceRepository: user_preferences
- PropertyRepository: properties (sólo lectura)
- MatchScoreRepository: match_scores
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from rentmatch.config import (
    MATCH_SCORES_TABLE,
    PREFERENCES_TABLE,
    PROPERTIES_TABLE,
    get_settings,
)
from rentmatch.database.supabase_client import get_supabase_client, SupabaseClient
from rentmatch.models import MatchScore, Property, PropertyStatus, UserPreferences

logger = structlog.get_logger()


class BaseRepository:
    """Clase base para repositorios."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client


class PreferenceRepository(BaseRepository):
    """Repositorio de preferencias (una fila por usuario)."""

    TABLE = PREFERENCES_TABLE

    def get_by_user_id(self, user_id: str) -> Optional[UserPreferences]:
        """Obtiene las preferencias de un usuario, o None si nunca las guardó."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UserPreferences.model_validate(response.data[0])

    def upsert(self, preferences: UserPreferences) -> dict:
        """
        Inserta o actualiza las preferencias basado en user_id.

        Returns:
            El registro insertado/actualizado
        """
        data = preferences.to_db_dict()
        response = (
            self.client.table(self.TABLE)
            .upsert(data, on_conflict="user_id")
            .execute()
        )
        logger.info("Preferencias guardadas", user_id=preferences.user_id)
        return response.data[0] if response.data else {}

    def get_user_ids(self) -> list[str]:
        """Obtiene los IDs de todos los usuarios con preferencias guardadas."""
        response = self.client.table(self.TABLE).select("user_id").execute()
        return [row["user_id"] for row in response.data]


class PropertyRepository(BaseRepository):
    """Repositorio del catálogo de propiedades."""

    TABLE = PROPERTIES_TABLE

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        page_size: Optional[int] = None,
    ):
        super().__init__(client)
        self.page_size = page_size or get_settings().catalog_page_size

    def get_by_id(self, property_id: str) -> Optional[Property]:
        """Obtiene una propiedad por su UUID."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", property_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return Property.model_validate(response.data[0])

    def get_available(self) -> list[Property]:
        """
        Obtiene todas las propiedades con status 'available'.

        PostgREST corta las respuestas en max-rows, así que se pagina
        con range() hasta recibir una página incompleta. Las filas que no
        validan (ej: coordenadas fuera de rango) se loguean y se saltean.
        """
        properties: list[Property] = []
        start = 0
        while True:
            response = (
                self.client.table(self.TABLE)
                .select("*")
                .eq("status", PropertyStatus.AVAILABLE.value)
                .order("id")
                .range(start, start + self.page_size - 1)
                .execute()
            )
            rows = response.data or []
            for row in rows:
                try:
                    properties.append(Property.model_validate(row))
                except ValidationError as e:
                    logger.warning(
                        "Propiedad inválida, se omite del catálogo",
                        property_id=row.get("id"),
                        error=str(e),
                    )
            if len(rows) < self.page_size:
                break
            start += self.page_size

        logger.debug("Propiedades disponibles", total=len(properties))
        return properties


class MatchScoreRepository(BaseRepository):
    """Repositorio de scores de compatibilidad."""

    TABLE = MATCH_SCORES_TABLE

    def upsert(self, match_score: MatchScore) -> dict:
        """
        Inserta o actualiza el score de un par usuario x propiedad.

        Es un único INSERT ... ON CONFLICT (user_id, property_id) DO UPDATE,
        así que dos rescores concurrentes nunca duplican la fila.

        Returns:
            El registro insertado/actualizado
        """
        data = match_score.to_db_dict()
        try:
            response = (
                self.client.table(self.TABLE)
                .upsert(data, on_conflict="user_id,property_id")
                .execute()
            )
        except Exception as e:
            logger.error(
                "Error guardando match score",
                user_id=match_score.user_id,
                property_id=match_score.property_id,
                error=str(e),
            )
            raise
        logger.debug(
            "Match score upserted",
            user_id=match_score.user_id,
            property_id=match_score.property_id,
            score=match_score.score,
        )
        return response.data[0] if response.data else {}

    def get_for_user(self, user_id: str, limit: int = 50) -> list[MatchScore]:
        """Obtiene los scores de un usuario con su propiedad, de mayor a menor."""
        response = (
            self.client.table(self.TABLE)
            .select("*, properties(*)")
            .eq("user_id", user_id)
            .order("score", desc=True)
            .limit(limit)
            .execute()
        )
        return [MatchScore.model_validate(row) for row in response.data]

    def get_score(self, user_id: str, property_id: str) -> Optional[MatchScore]:
        """Obtiene el score persistido de un par, si existe."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("property_id", property_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return MatchScore.model_validate(response.data[0])

    def count_for_user(self, user_id: str) -> int:
        """Cantidad de scores persistidos para un usuario."""
        response = (
            self.client.table(self.TABLE)
            .select("id", count="exact")
            .eq("user_id", user_id)
            .execute()
        )
        return response.count or 0
