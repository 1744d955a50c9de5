"""
Sub-scores de compatibilidad usuario x propiedad.

Funciones puras, sin I/O. Cada una devuelve un entero acotado:

- Presupuesto: 0-30
- Dormitorios: 0-25
- Amenities: 0-20
- Ubicación: 0-15
- Features (mascotas, amoblado, cochera): 0-10

La suma se acota a 0-100.
"""

import math
from typing import Iterable, Optional, Sequence

from rentmatch.models import MatchFactors, Property, UserPreferences

# Radio medio de la Tierra en millas
EARTH_RADIUS_MILES = 3959

MAX_SCORE = 100

# Scores neutros cuando el usuario no expresó preferencia
NEUTRAL_BEDROOM_SCORE = 10
NEUTRAL_AMENITY_SCORE = 10
NEUTRAL_LOCATION_SCORE = 8


def score_budget(price: int, budget_min: int, budget_max: int) -> int:
    """
    Ajuste del precio al presupuesto (0-30).

    Dentro del rango suma 30 y por debajo 20. Por encima arranca en 15
    y pierde un punto por cada 100 completos de exceso.
    """
    if budget_min <= price <= budget_max:
        return 30
    if price < budget_min:
        return 20
    return max(0, 15 - (price - budget_max) // 100)


def score_bedrooms(property_bedrooms: int, preferred_bedrooms: Sequence[int]) -> int:
    """
    Ajuste de dormitorios (0-25).

    Si no hay coincidencia exacta se compara sólo contra el primer
    valor preferido, no contra el más cercano.
    """
    if property_bedrooms in preferred_bedrooms:
        return 25
    if preferred_bedrooms:
        return max(0, 15 - abs(property_bedrooms - preferred_bedrooms[0]) * 5)
    return NEUTRAL_BEDROOM_SCORE


def score_amenities(
    property_amenities: Iterable[str], preferred_amenities: Iterable[str]
) -> int:
    """Proporción de amenities deseados que ofrece la propiedad (0-20)."""
    preferred = set(preferred_amenities)
    if not preferred:
        return NEUTRAL_AMENITY_SCORE
    match_count = len(preferred & set(property_amenities))
    return match_count * 20 // len(preferred)


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Distancia de gran círculo en millas (ley esférica de cosenos).

    El argumento de acos se acota a [-1, 1]: por redondeo puede pasarse
    apenas de 1 con puntos idénticos.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lng = math.radians(lng2) - math.radians(lng1)

    cosine = math.cos(phi1) * math.cos(phi2) * math.cos(delta_lng) + math.sin(
        phi1
    ) * math.sin(phi2)
    cosine = max(-1.0, min(1.0, cosine))
    return EARTH_RADIUS_MILES * math.acos(cosine)


def _round_half_up(value: float) -> int:
    # Redondeo de Postgres (numeric -> integer), no el bancario de round()
    return math.floor(value + 0.5)


def score_location(
    property_lat: Optional[float],
    property_lng: Optional[float],
    user_lat: Optional[float],
    user_lng: Optional[float],
    search_radius: float,
) -> int:
    """
    Cercanía a la zona buscada (0-15).

    Decae linealmente de 15 en el centro a 0 en el borde del radio.
    Fuera del radio, o con radio <= 0, suma 0. Sin coordenadas de
    alguno de los dos lados devuelve el neutro.
    """
    if None in (property_lat, property_lng, user_lat, user_lng):
        return NEUTRAL_LOCATION_SCORE

    distance = haversine_miles(user_lat, user_lng, property_lat, property_lng)
    if distance > search_radius or search_radius <= 0:
        return 0
    return max(0, _round_half_up(15 - distance * 15 / search_radius))


def _flag_score(wanted: bool, offered: bool, match_points: int, indifferent_points: int) -> int:
    if wanted and offered:
        return match_points
    if not wanted:
        return indifferent_points
    return 0


def score_features(prop: Property, prefs: UserPreferences) -> int:
    """
    Coincidencia de features booleanas (0-10).

    Mascotas y amoblado: +3 si se busca y se ofrece, +1 si no se busca.
    Cochera: +4 si se requiere y se ofrece, +2 si no se requiere.
    """
    return (
        _flag_score(prefs.pet_friendly, prop.pet_friendly, 3, 1)
        + _flag_score(prefs.furnished_preferred, prop.furnished, 3, 1)
        + _flag_score(prefs.parking_required, prop.parking_included, 4, 2)
    )


def calculate_factors(prefs: UserPreferences, prop: Property) -> MatchFactors:
    """Calcula los cinco sub-scores y el total acotado a 0-100."""
    budget = score_budget(prop.price, prefs.budget_min, prefs.budget_max)
    bedrooms = score_bedrooms(prop.bedrooms, prefs.preferred_bedrooms)
    amenities = score_amenities(prop.amenities, prefs.preferred_amenities)
    location = score_location(
        prop.latitude,
        prop.longitude,
        prefs.location_lat,
        prefs.location_lng,
        prefs.search_radius,
    )
    features = score_features(prop, prefs)

    total = max(0, min(MAX_SCORE, budget + bedrooms + amenities + location + features))

    return MatchFactors(
        budget_score=budget,
        bedroom_score=bedrooms,
        amenity_score=amenities,
        location_score=location,
        feature_score=features,
        total_score=total,
    )
