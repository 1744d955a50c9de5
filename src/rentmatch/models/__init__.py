"""
Modelos de datos del sistema.

- UserPreferences: lo que busca el inquilino
- Property: lo que ofrece el landlord
- MatchScore: la compatibilidad persistida entre ambos
"""

from rentmatch.models.preferences import UserPreferences
from rentmatch.models.property import Property, PropertyStatus
from rentmatch.models.match_score import MatchFactors, MatchScore

__all__ = [
    # Usuario
    "UserPreferences",
    # Catálogo
    "Property",
    "PropertyStatus",
    # Resultado
    "MatchFactors",
    "MatchScore",
]
