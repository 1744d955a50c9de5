"""
Motor de matching.

Combina cinco sub-scores por reglas (presupuesto, dormitorios,
amenities, ubicación y features) en un score 0-100 por propiedad.
"""

from rentmatch.matching.engine import MatchScoreEngine, MatchResult
from rentmatch.matching.scoring import calculate_factors, haversine_miles

__all__ = [
    "MatchScoreEngine",
    "MatchResult",
    "calculate_factors",
    "haversine_miles",
]
