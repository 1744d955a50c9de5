"""
Tests basados en propiedades del cálculo de compatibilidad.

Hypothesis genera preferencias y propiedades arbitrarias (con y sin
ubicación, radios en cero) y verifica cotas, suma y determinismo.
"""

from hypothesis import HealthCheck, given, settings, strategies as st

from rentmatch.matching.scoring import calculate_factors, score_location
from rentmatch.models import Property, UserPreferences

AMENITIES = ["gym", "pool", "laundry", "doorman", "balcony", "elevator"]

latitudes = st.floats(min_value=-90, max_value=90, allow_nan=False)
longitudes = st.floats(min_value=-180, max_value=180, allow_nan=False)

# El fixture autouse de conftest es function-scoped y no afecta a estas funciones puras
pbt_settings = settings(
    max_examples=200,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


@st.composite
def preferences_strategy(draw: st.DrawFn) -> UserPreferences:
    budget_min = draw(st.integers(min_value=0, max_value=10_000))
    budget_max = draw(st.integers(min_value=0, max_value=10_000))
    has_location = draw(st.booleans())
    return UserPreferences(
        user_id="user-pbt",
        budget_min=budget_min,
        budget_max=budget_max,
        preferred_bedrooms=draw(st.lists(st.integers(min_value=0, max_value=8), max_size=4)),
        preferred_amenities=draw(st.lists(st.sampled_from(AMENITIES), max_size=6)),
        pet_friendly=draw(st.booleans()),
        furnished_preferred=draw(st.booleans()),
        parking_required=draw(st.booleans()),
        location_lat=draw(latitudes) if has_location else None,
        location_lng=draw(longitudes) if has_location else None,
        search_radius=draw(
            st.one_of(st.just(0), st.floats(min_value=0, max_value=500, allow_nan=False))
        ),
    )


@st.composite
def property_strategy(draw: st.DrawFn) -> Property:
    return Property(
        id="prop-pbt",
        price=draw(st.integers(min_value=0, max_value=50_000)),
        bedrooms=draw(st.integers(min_value=0, max_value=10)),
        amenities=draw(st.lists(st.sampled_from(AMENITIES), max_size=6)),
        pet_friendly=draw(st.booleans()),
        furnished=draw(st.booleans()),
        parking_included=draw(st.booleans()),
        # Cada coordenada puede faltar por separado
        latitude=draw(st.one_of(st.none(), latitudes)),
        longitude=draw(st.one_of(st.none(), longitudes)),
    )


class TestCalculateFactorsProperties:
    @pbt_settings
    @given(prefs=preferences_strategy(), prop=property_strategy())
    def test_subscores_stay_in_bounds(self, prefs, prop):
        factors = calculate_factors(prefs, prop)

        assert 0 <= factors.budget_score <= 30
        assert 0 <= factors.bedroom_score <= 25
        assert 0 <= factors.amenity_score <= 20
        assert 0 <= factors.location_score <= 15
        assert 0 <= factors.feature_score <= 10
        assert 0 <= factors.total_score <= 100

    @pbt_settings
    @given(prefs=preferences_strategy(), prop=property_strategy())
    def test_total_is_sum_of_subscores(self, prefs, prop):
        factors = calculate_factors(prefs, prop)

        subtotal = (
            factors.budget_score
            + factors.bedroom_score
            + factors.amenity_score
            + factors.location_score
            + factors.feature_score
        )
        assert factors.total_score == max(0, min(100, subtotal))

    @pbt_settings
    @given(prefs=preferences_strategy(), prop=property_strategy())
    def test_same_input_same_factors(self, prefs, prop):
        assert calculate_factors(prefs, prop) == calculate_factors(prefs, prop)

    @pbt_settings
    @given(prefs=preferences_strategy(), prop=property_strategy())
    def test_missing_coordinates_score_neutral(self, prefs, prop):
        factors = calculate_factors(prefs, prop)

        if not prefs.has_location or prop.latitude is None or prop.longitude is None:
            assert factors.location_score == 8


class TestScoreLocationProperties:
    @pbt_settings
    @given(
        prop_lat=latitudes,
        prop_lng=longitudes,
        user_lat=latitudes,
        user_lng=longitudes,
        radius=st.floats(max_value=0, allow_nan=False, allow_infinity=False),
    )
    def test_non_positive_radius_scores_zero(self, prop_lat, prop_lng, user_lat, user_lng, radius):
        assert score_location(prop_lat, prop_lng, user_lat, user_lng, radius) == 0

    @pbt_settings
    @given(
        lat=latitudes,
        lng=longitudes,
        radius=st.floats(min_value=0.01, max_value=500, allow_nan=False),
    )
    def test_same_point_scores_full(self, lat, lng, radius):
        assert score_location(lat, lng, lat, lng, radius) == 15
