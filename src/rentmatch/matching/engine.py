"""
Motor de matching entre usuarios y propiedades.

Implementa:
- Score puntual: calcula y persiste el score de un par usuario x propiedad
- Rescore batch: recalcula todos los scores de un usuario contra el
  catálogo disponible cada vez que guarda sus preferencias
- Lectura: scores persistidos ordenados para la UI

Editar una propiedad NO dispara un rescore: sus scores quedan como
estaban hasta que cada usuario vuelva a guardar preferencias o se
corra recompute_all_users().
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

import structlog

from rentmatch.config import Settings, get_settings
from rentmatch.database import (
    MatchScoreRepository,
    PreferenceRepository,
    PropertyRepository,
)
from rentmatch.matching.scoring import calculate_factors
from rentmatch.models import MatchScore, Property, UserPreferences

logger = structlog.get_logger()


@dataclass
class MatchResult:
    """Resultado de matching para un par usuario x propiedad."""

    user_id: str
    property_id: str
    score: int  # 0 a 100
    factors: dict = field(default_factory=dict)  # vacío si faltaban datos

    @property
    def is_scored(self) -> bool:
        """False cuando faltaban preferencias o propiedad (sin ranking)."""
        return bool(self.factors)


class MatchScoreEngine:
    """
    Motor de compatibilidad basado en reglas.

    Flujo de un rescore:
    1. Leer las preferencias del usuario (una sola vez)
    2. Obtener todas las propiedades con status 'available'
    3. Para cada una, calcular los sub-scores y hacer upsert en match_scores

    No reintenta: si un upsert falla, el error llega al caller.
    """

    def __init__(
        self,
        preference_repo: Optional[PreferenceRepository] = None,
        property_repo: Optional[PropertyRepository] = None,
        match_score_repo: Optional[MatchScoreRepository] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.preference_repo = preference_repo or PreferenceRepository()
        self.property_repo = property_repo or PropertyRepository()
        self.match_score_repo = match_score_repo or MatchScoreRepository()

    def compute_match_score(self, user_id: str, property_id: str) -> MatchResult:
        """
        Calcula y persiste el score de un usuario para una propiedad.

        Args:
            user_id: UUID del usuario
            property_id: UUID de la propiedad

        Returns:
            MatchResult con el score persistido. Si no hay preferencias o
            no existe la propiedad, score 0 y factors vacío (no se escribe nada).
        """
        preferences = self.preference_repo.get_by_user_id(user_id)
        prop = self.property_repo.get_by_id(property_id)

        if preferences is None or prop is None:
            logger.info(
                "Sin datos para calcular match",
                user_id=user_id,
                property_id=property_id,
                has_preferences=preferences is not None,
                has_property=prop is not None,
            )
            return MatchResult(user_id=user_id, property_id=property_id, score=0)

        return self._score_and_persist(preferences, prop)

    def _score_and_persist(
        self, preferences: UserPreferences, prop: Property
    ) -> MatchResult:
        factors = calculate_factors(preferences, prop)
        match_score = MatchScore(
            user_id=preferences.user_id,
            property_id=prop.id,
            score=factors.total_score,
            factors=factors,
        )
        self.match_score_repo.upsert(match_score)

        return MatchResult(
            user_id=match_score.user_id,
            property_id=match_score.property_id,
            score=match_score.score,
            factors=factors.model_dump(),
        )

    async def recompute_all_for_user(self, user_id: str) -> dict:
        """
        Recalcula los scores de un usuario contra todo el catálogo disponible.

        Con rescore_concurrency > 1 los upserts corren en threads; el
        upsert es atómico por (user_id, property_id) así que el orden no importa.

        Returns:
            Estadísticas del rescore
        """
        stats = {"user_id": user_id, "properties": 0, "scored": 0}

        preferences = self.preference_repo.get_by_user_id(user_id)
        if preferences is None:
            logger.info("Usuario sin preferencias, nada que recalcular", user_id=user_id)
            return stats

        properties = self.property_repo.get_available()
        stats["properties"] = len(properties)
        logger.info("Iniciando rescore", user_id=user_id, properties=len(properties))

        concurrency = self.settings.rescore_concurrency
        if concurrency <= 1:
            for prop in properties:
                self._score_and_persist(preferences, prop)
                stats["scored"] += 1
        else:
            semaphore = asyncio.Semaphore(concurrency)

            async def score_one(prop: Property) -> MatchResult:
                async with semaphore:
                    return await asyncio.to_thread(
                        self._score_and_persist, preferences, prop
                    )

            results = await asyncio.gather(*(score_one(p) for p in properties))
            stats["scored"] = len(results)

        logger.info("Rescore completado", **stats)
        return stats

    async def save_preferences(self, preferences: UserPreferences) -> dict:
        """
        Guarda las preferencias y dispara el rescore completo del usuario.

        No es transaccional: si el rescore falla, las preferencias quedan
        guardadas y los scores viejos. El error se propaga y el caller debe
        reintentar con recompute_all_for_user(), no volver a guardar.

        Returns:
            Estadísticas del rescore
        """
        self.preference_repo.upsert(preferences)
        try:
            return await self.recompute_all_for_user(preferences.user_id)
        except Exception as e:
            logger.error(
                "Preferencias guardadas pero el rescore falló, scores desactualizados",
                user_id=preferences.user_id,
                error=str(e),
            )
            raise

    async def recompute_all_users(self) -> dict:
        """
        Recalcula los scores de todos los usuarios con preferencias.

        Pensado para un job administrativo: es la única forma de refrescar
        scores después de editar propiedades.
        """
        stats = {"users": 0, "scored": 0}

        for user_id in self.preference_repo.get_user_ids():
            user_stats = await self.recompute_all_for_user(user_id)
            stats["users"] += 1
            stats["scored"] += user_stats["scored"]

        logger.info("Rescore global completado", **stats)
        return stats

    def get_match_scores(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[MatchScore]:
        """Scores persistidos del usuario, de mayor a menor, con su propiedad."""
        return self.match_score_repo.get_for_user(
            user_id, limit=limit or self.settings.match_scores_limit
        )

    def get_property_match_score(self, user_id: str, property_id: str) -> int:
        """Score persistido de una propiedad, 0 si todavía no fue rankeada."""
        match_score = self.match_score_repo.get_score(user_id, property_id)
        return match_score.score if match_score else 0

    def get_top_matches(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[MatchScore]:
        """Mejores matches cuya propiedad sigue existiendo."""
        limit = limit or self.settings.top_matches_limit
        scores = self.get_match_scores(user_id)
        return [s for s in scores if s.properties][:limit]
