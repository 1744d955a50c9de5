"""
Modelo de MatchScore

Resultado persistido del matching, una fila por (user_id, property_id).
`factors` guarda el desglose para explicar el score en la UI.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchFactors(BaseModel):
    """Desglose de los cinco sub-scores más el total."""

    budget_score: int = Field(ge=0, le=30, description="Ajuste al presupuesto")
    bedroom_score: int = Field(ge=0, le=25, description="Ajuste de dormitorios")
    amenity_score: int = Field(ge=0, le=20, description="Amenities en común")
    location_score: int = Field(ge=0, le=15, description="Cercanía a la zona buscada")
    feature_score: int = Field(ge=0, le=10, description="Mascotas, amoblado, cochera")
    total_score: int = Field(ge=0, le=100, description="Suma acotada a 0-100")


class MatchScore(BaseModel):
    """
    Fila de `match_scores`.

    La escribe únicamente el motor de matching; el resto del sistema
    sólo la lee para ordenar y explicar resultados.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Optional[str] = Field(None, description="UUID generado por Supabase")
    user_id: str = Field(..., description="FK al usuario")
    property_id: str = Field(..., description="FK a la propiedad")
    score: int = Field(..., ge=0, le=100)
    # None si la fila trae factors vacío o con otro formato (sin desglose)
    factors: Optional[MatchFactors] = None

    # Join opcional con `properties` cuando se lee para la UI
    properties: Optional[dict] = Field(None, description="Fila de la propiedad")

    created_at: Optional[str] = Field(None)
    updated_at: Optional[str] = Field(None)

    @field_validator("factors", mode="before")
    @classmethod
    def _incomplete_factors_as_none(cls, value):
        if isinstance(value, dict) and not set(MatchFactors.model_fields) <= set(value):
            return None
        return value

    def to_db_dict(self) -> dict:
        """
        Convierte a diccionario para upsert en Supabase.

        No incluye `created_at`: en un update el valor original se conserva.
        """
        return {
            "user_id": self.user_id,
            "property_id": self.property_id,
            "score": self.score,
            "factors": self.factors.model_dump() if self.factors else {},
            "updated_at": datetime.utcnow().isoformat(),
        }
